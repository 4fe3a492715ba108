"""Set Algebra — key-set union, intersection and difference over IndexedMaps.

Invariants:
    - The result always carries the FIRST operand's projection
    - union: keys(a) | keys(b), a's value wins on a shared key
    - intersect: keys(a) & keys(b), values taken from a
    - difference: keys(a) - keys(b)
    - Neither operand is modified
    - Keys that cannot be ordered against each other raise UnorderableKeyError

Design Decisions:
    - Operands need not share a projection (it is not part of the key type). Entries
      contributed by b keep b's keys, so union with a b keyed differently can break
      key derivation; invariant_audit.find_violations detects it
    - Extracted from indexed_map.py to keep the container class focused
"""

from sortedcontainers import SortedDict

from indexed_map.core.errors import ErrorContext, UnorderableKeyError
from indexed_map.core.indexed_map import IndexedMap


def union(a: IndexedMap, b: IndexedMap) -> IndexedMap:
    """All entries of both maps; on a shared key the entry from `a` wins."""
    backing = b._backing.copy()
    for key, value in a._backing.items():
        try:
            backing[key] = value
        except TypeError as exc:
            raise UnorderableKeyError(
                key, str(exc), ErrorContext(operation="union"),
            ) from exc
    return IndexedMap._wrap(a.projection, backing)


def intersect(a: IndexedMap, b: IndexedMap) -> IndexedMap:
    """Entries of `a` whose key is also present in `b`."""
    return IndexedMap._wrap(
        a.projection,
        SortedDict((k, v) for k, v in a._backing.items() if k in b._backing),
    )


def difference(a: IndexedMap, b: IndexedMap) -> IndexedMap:
    """Entries of `a` whose key is absent from `b`."""
    return IndexedMap._wrap(
        a.projection,
        SortedDict((k, v) for k, v in a._backing.items() if k not in b._backing),
    )
