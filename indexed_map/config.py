"""Package Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Settings come from INDEXED_MAP_* environment variables or a .env file
    - get_settings() is cached (lru_cache): single instance per process
    - The core never reads settings; only the shell (logging setup, demo) does

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env support
    - Defaults for everything: importing and using the container needs no setup
"""

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_FORMATS = ("json", "text")


class Settings(BaseSettings):
    """Settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="INDEXED_MAP_", env_file=".env", case_sensitive=False,
    )

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    # Demo (python -m indexed_map)
    demo_record_count: int = 5

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {v!r}")
        return level

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        if v not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {_LOG_FORMATS}, got {v!r}")
        return v

    @field_validator("demo_record_count")
    @classmethod
    def check_demo_record_count(cls, v: int) -> int:
        if v < 1:
            raise ValueError("demo_record_count must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
