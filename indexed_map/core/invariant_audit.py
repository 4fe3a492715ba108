"""Invariant Audit — detect, assert and repair key-derivation violations.

Invariants:
    - find_violations never raises for a violation; it reports them in ascending
      stored-key order
    - check_invariant raises InvariantViolationError only when a violation exists
    - repair re-derives every key from its value with the map's own projection

Design Decisions:
    - Auditing is opt-in and explicit: the unsafe in-place transform and mixed
      projection unions perform no checks, so this module is where callers
      restore key derivation
    - Pure functions over IndexedMap, not methods: keeps the container's surface small
"""

import logging
from typing import Any, NamedTuple

from indexed_map.core.errors import InvariantViolationError
from indexed_map.core.indexed_map import IndexedMap

logger = logging.getLogger(__name__)


class Violation(NamedTuple):
    """An entry filed under `key` whose value actually derives `derived_key`."""
    key: Any
    value: Any
    derived_key: Any


def find_violations(imap: IndexedMap) -> list[Violation]:
    """Every entry whose stored key differs from projection(value)."""
    projection = imap.projection
    violations = []
    for key, value in imap.items():
        derived = projection(value)
        if derived != key:
            violations.append(Violation(key, value, derived))
    if violations:
        logger.warning(
            "IndexedMap holds entries under stale keys",
            extra={"operation": "find_violations", "violations": len(violations)},
        )
    return violations


def check_invariant(imap: IndexedMap) -> IndexedMap:
    """Return `imap` unchanged if every key equals projection(value).

    Raises InvariantViolationError listing the stale keys otherwise.
    """
    violations = find_violations(imap)
    if violations:
        raise InvariantViolationError([v.key for v in violations])
    return imap


def repair(imap: IndexedMap) -> IndexedMap:
    """Rebuild from values so every key is re-derived.

    Entries whose re-derived keys collide collapse, the last in ascending
    stored-key order winning, exactly as in IndexedMap.from_values.
    """
    return IndexedMap.from_values(imap.projection, imap.values())
