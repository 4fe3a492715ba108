"""Root conftest — shared test configuration.

Invariants:
    - Settings are re-read from the environment for every test (cache cleared)
    - No stray INDEXED_MAP_* variables from the host leak into tests
"""

import os

import pytest

from indexed_map.config import get_settings

for _name in [n for n in os.environ if n.startswith("INDEXED_MAP_")]:
    del os.environ[_name]


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
