"""Structured Logging — JSON formatter and setup for IndexedMap diagnostics.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (operation, size_before, size_after, violations, key) surfaced when present
    - JSON format by default, human-readable "text" format on request
    - setup_logging is idempotent: calling it again replaces its own handler

Design Decisions:
    - Stdlib logging + small JSONFormatter: the core only ever calls
      logging.getLogger(__name__), applications decide where logs go
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = ("operation", "size_before", "size_after", "violations", "key")

_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """Format logs as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=repr)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging; returns the installed handler."""
    global _handler
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    if _handler is not None:
        logging.root.removeHandler(_handler)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _handler = handler
    return handler
