"""indexed_map — ordered mappings whose keys are derived from their values.

Invariants:
    - Package root has no import side-effects (no logging or settings setup)

Design Decisions:
    - Explicit re-exports of the public surface only, no star exports
"""

from indexed_map.core.errors import (
    IndexedMapError,
    InvariantViolationError,
    MissingKeyError,
    SnapshotVersionError,
    UnorderableKeyError,
)
from indexed_map.core.indexed_map import IndexedMap
from indexed_map.core.set_algebra import difference, intersect, union

__all__ = [
    "IndexedMap",
    "IndexedMapError",
    "InvariantViolationError",
    "MissingKeyError",
    "SnapshotVersionError",
    "UnorderableKeyError",
    "difference",
    "intersect",
    "union",
]
