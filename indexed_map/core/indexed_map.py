"""IndexedMap — an ordered mapping whose keys are derived from its values.

Invariants:
    - Key derivation: for every stored (key, value), projection(value) == key
    - Keys are only ever derived (insert takes a value, never a key)
    - Every operation returns a new IndexedMap; no instance is mutated after
      construction, so a backing SortedDict may be shared between instances
    - keys(), values(), items(), to_pairs() iterate in ascending key order
    - map_values_in_place_unsafe is the one operation that can break key derivation;
      it does not check. invariant_audit.repair restores it

Design Decisions:
    - sortedcontainers.SortedDict as the backing ordered map: no hand-rolled tree
    - No public constructor: only empty / singleton / from_values / from_map (and
      the from_pairs / from_records shortcuts) can create instances, so no caller
      can pair a key with a value whose projection disagrees
    - Collisions are last-write-wins, not errors; rebuild collapse is logged at DEBUG
    - __slots__ with a blocking __setattr__, so pickling goes through __reduce__
      and deepcopy registers its clone in memo before copying the backing
    - Safe (rebuilding, O(n log n)) and unsafe (in-place, O(n)) transforms are
      both kept on purpose
"""

import copy
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from sortedcontainers import SortedDict

from indexed_map.core import projections
from indexed_map.core.domain_types import A, EntryPredicate, K, K2, Projection, Rewrite, V, V2
from indexed_map.core.errors import ErrorContext, MissingKeyError, UnorderableKeyError

logger = logging.getLogger(__name__)


def _file_values(
    backing: SortedDict, projection: Projection, values: Iterable, operation: str,
) -> SortedDict:
    """Write each value under its derived key into `backing` (mutates it)."""
    for value in values:
        key = projection(value)
        try:
            backing[key] = value
        except TypeError as exc:
            raise UnorderableKeyError(
                key, str(exc), ErrorContext(operation=operation),
            ) from exc
    return backing


class IndexedMap(Mapping[K, V]):
    """Immutable sorted mapping K -> V where every key is projection(value)."""

    __slots__ = ("_projection", "_backing")

    def __init__(self, *args: Any, **kwargs: Any):
        raise TypeError(
            "IndexedMap has no public constructor; use IndexedMap.empty, "
            "singleton, from_values, from_map, from_pairs or from_records"
        )

    @classmethod
    def _wrap(cls, projection: Projection, backing: SortedDict) -> "IndexedMap":
        """Raw constructor. Caller guarantees key derivation (or knowingly breaks it)."""
        instance = object.__new__(cls)
        object.__setattr__(instance, "_projection", projection)
        object.__setattr__(instance, "_backing", backing)
        return instance

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"IndexedMap is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"IndexedMap is immutable; cannot delete {name!r}")

    def __copy__(self) -> "IndexedMap[K, V]":
        return self

    def __deepcopy__(self, memo: dict) -> "IndexedMap[K, V]":
        # Registered before the backing is copied so values referring back to
        # this map resolve to the clone.
        clone = object.__new__(type(self))
        memo[id(self)] = clone
        object.__setattr__(clone, "_projection", self._projection)
        object.__setattr__(clone, "_backing", copy.deepcopy(self._backing, memo))
        return clone

    def __reduce__(self) -> tuple:
        return (_restore, (self._projection, self._backing))

    # === Construction =========================================================

    @classmethod
    def empty(cls, projection: Projection) -> "IndexedMap":
        """A map with no entries that will key future values by `projection`."""
        return cls._wrap(projection, SortedDict())

    @classmethod
    def singleton(cls, projection: Projection, value: Any) -> "IndexedMap":
        return cls._wrap(
            projection, _file_values(SortedDict(), projection, (value,), "singleton"),
        )

    @classmethod
    def from_values(cls, projection: Projection, values: Iterable) -> "IndexedMap":
        """Key every value by `projection`; later values win on key collision."""
        return cls._wrap(
            projection, _file_values(SortedDict(), projection, values, "from_values"),
        )

    @classmethod
    def from_map(cls, projection: Projection, mapping: Mapping) -> "IndexedMap":
        """Discard `mapping`'s keys and re-key its values by `projection`.

        Establishes key derivation whatever keys the source used; values whose
        derived keys collide keep the one met last in `mapping`'s iteration order.
        """
        return cls._wrap(
            projection,
            _file_values(SortedDict(), projection, mapping.values(), "from_map"),
        )

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple]) -> "IndexedMap":
        """Key `(key, payload)` tuples by their first component."""
        return cls.from_values(projections.first, pairs)

    @classmethod
    def from_records(cls, records: Iterable) -> "IndexedMap":
        """Key records by their `id` attribute (or `"id"` entry)."""
        return cls.from_values(projections.by_id, records)

    # === Query ================================================================

    @property
    def projection(self) -> Projection:
        """The value -> key function this map files values under."""
        return self._projection

    def is_empty(self) -> bool:
        return not self._backing

    def size(self) -> int:
        return len(self._backing)

    def contains_key(self, key: Any) -> bool:
        return key in self._backing

    def contains_by_projection(self, value: Any) -> bool:
        """True if some entry sits at `projection(value)`; the stored value is not compared."""
        return self._projection(value) in self._backing

    def contains_exact(self, value: Any) -> bool:
        """True only if the entry at `projection(value)` equals `value`.

        Distinguishes "a value with this derived key is present" from "this
        exact value is present, unchanged".
        """
        key = self._projection(value)
        if key not in self._backing:
            return False
        return self._backing[key] == value

    def get(self, key: Any, default: Any = None) -> Any:
        """Value at `key`, or `default` (None) when absent. Never raises for absent keys."""
        return self._backing.get(key, default)

    def lookup_min(self) -> tuple | None:
        """Smallest (key, value) pair, or None when empty."""
        if not self._backing:
            return None
        return self._backing.peekitem(0)

    def lookup_max(self) -> tuple | None:
        """Largest (key, value) pair, or None when empty."""
        if not self._backing:
            return None
        return self._backing.peekitem(-1)

    # --- Mapping protocol ---

    def __getitem__(self, key: Any) -> V:
        try:
            return self._backing[key]
        except KeyError:
            raise MissingKeyError(key) from None

    def __iter__(self) -> Iterator[K]:
        return iter(self._backing)

    def __len__(self) -> int:
        return len(self._backing)

    def __contains__(self, key: object) -> bool:
        return key in self._backing

    def __eq__(self, other: object) -> bool:
        # Projections are opaque and never compared.
        if isinstance(other, IndexedMap):
            return self.to_pairs() == other.to_pairs()
        if isinstance(other, Mapping):
            return dict(self._backing.items()) == dict(other.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"IndexedMap({dict(self._backing.items())!r})"

    # === Mutation (returns new maps) ==========================================

    def insert(self, value: V) -> "IndexedMap[K, V]":
        """File `value` under projection(value), replacing any entry already there."""
        return self._wrap(
            self._projection,
            _file_values(self._backing.copy(), self._projection, (value,), "insert"),
        )

    def insert_many(self, values: Iterable[V]) -> "IndexedMap[K, V]":
        """Insert each value in turn; later values win on key collision."""
        return self._wrap(
            self._projection,
            _file_values(self._backing.copy(), self._projection, values, "insert_many"),
        )

    def remove(self, key: Any) -> "IndexedMap[K, V]":
        """Drop the entry at `key`. An absent key returns an equal map."""
        if key not in self._backing:
            return self
        backing = self._backing.copy()
        del backing[key]
        return self._wrap(self._projection, backing)

    def remove_value(self, value: V) -> "IndexedMap[K, V]":
        """Drop whatever entry sits at projection(value)."""
        return self.remove(self._projection(value))

    def adjust(self, key: Any, rewrite: Callable[[V], V]) -> "IndexedMap[K, V]":
        """Rewrite the single value at `key` and re-file it under its new derived key.

        If the rewritten value derives a different key it moves there, replacing
        any entry already at that key. An absent `key` returns an equal map.
        """
        if key not in self._backing:
            return self
        backing = self._backing.copy()
        value = backing.pop(key)
        return self._wrap(
            self._projection,
            _file_values(backing, self._projection, (rewrite(value),), "adjust"),
        )

    # === Traversal ============================================================

    def keys(self):
        """Ascending keys, as an indexable view."""
        return self._backing.keys()

    def values(self):
        """Values in ascending key order, as an indexable view."""
        return self._backing.values()

    def items(self):
        """(key, value) pairs in ascending key order, as an indexable view."""
        return self._backing.items()

    def to_pairs(self) -> list[tuple]:
        """Ascending list of (key, value) tuples; the canonical order of the map."""
        return list(self._backing.items())

    def to_sorted_dict(self) -> SortedDict:
        """Independent SortedDict copy of the entries."""
        return self._backing.copy()

    def to_dict(self) -> dict:
        """Plain dict of the entries, inserted in ascending key order."""
        return dict(self._backing.items())

    def fold_left(self, combine: Callable[[A, K, V], A], seed: A) -> A:
        """Accumulate `combine(acc, key, value)` over entries in ascending key order."""
        acc = seed
        for key, value in self._backing.items():
            acc = combine(acc, key, value)
        return acc

    def fold_right(self, combine: Callable[[K, V, A], A], seed: A) -> A:
        """Accumulate `combine(key, value, acc)` over entries in descending key order."""
        acc = seed
        for key, value in reversed(self._backing.items()):
            acc = combine(key, value, acc)
        return acc

    # === Transform ============================================================

    def _rebuild(
        self, projection: Projection, rewrite: Rewrite, operation: str,
    ) -> "IndexedMap":
        rewritten = [rewrite(key, value) for key, value in self._backing.items()]
        backing = _file_values(SortedDict(), projection, rewritten, operation)
        if len(backing) < len(rewritten):
            logger.debug(
                "Rebuild collapsed colliding entries",
                extra={
                    "operation": operation,
                    "size_before": len(rewritten),
                    "size_after": len(backing),
                },
            )
        return self._wrap(projection, backing)

    def map_values_rebuilding(self, rewrite: Rewrite[K, V, V]) -> "IndexedMap[K, V]":
        """Rewrite every value, then rebuild with the same projection.

        Keys equal projection(value) afterwards even if `rewrite` changed the
        projected field. Values whose new derived keys collide are deduplicated
        (the last in ascending original-key order wins), so the result can be
        smaller than `self`. O(n log n).
        """
        return self._rebuild(self._projection, rewrite, "map_values_rebuilding")

    def map_values_and_reproject(
        self, projection: Callable[[V2], K2], rewrite: Rewrite[K, V, V2],
    ) -> "IndexedMap[K2, V2]":
        """Rewrite every value and rebuild under a new projection.

        For when the value type (and so its key) changes shape. Collisions collapse
        exactly as in map_values_rebuilding.
        """
        return self._rebuild(projection, rewrite, "map_values_and_reproject")

    def map_values_in_place_unsafe(self, rewrite: Rewrite[K, V, V]) -> "IndexedMap[K, V]":
        """Rewrite every value under its existing key, without re-deriving keys.

        O(n) and no rebuild, but NOT invariant-safe: if `rewrite` changes what the
        projection reads, entries stay filed under stale keys, and lookups by the
        true derived key miss. Nothing is checked here; use
        invariant_audit.find_violations / repair when in doubt.
        """
        backing = self._backing.copy()
        for key, value in self._backing.items():
            backing[key] = rewrite(key, value)
        return self._wrap(self._projection, backing)

    # === Filter / Partition ===================================================

    def keep(self, predicate: EntryPredicate) -> "IndexedMap[K, V]":
        """Entries for which predicate(key, value) holds."""
        return self._wrap(
            self._projection,
            SortedDict((k, v) for k, v in self._backing.items() if predicate(k, v)),
        )

    def reject(self, predicate: EntryPredicate) -> "IndexedMap[K, V]":
        """Entries for which predicate(key, value) does not hold."""
        return self._wrap(
            self._projection,
            SortedDict((k, v) for k, v in self._backing.items() if not predicate(k, v)),
        )

    def partition(
        self, predicate: EntryPredicate,
    ) -> tuple["IndexedMap[K, V]", "IndexedMap[K, V]"]:
        """(matching, non_matching): disjoint, and together cover every key of self."""
        matching, rest = [], []
        for key, value in self._backing.items():
            (matching if predicate(key, value) else rest).append((key, value))
        return (
            self._wrap(self._projection, SortedDict(matching)),
            self._wrap(self._projection, SortedDict(rest)),
        )

    # === Set Algebra ==========================================================

    def union(self, other: "IndexedMap[K, V]") -> "IndexedMap[K, V]":
        from indexed_map.core.set_algebra import union
        return union(self, other)

    def intersect(self, other: "IndexedMap[K, V]") -> "IndexedMap[K, V]":
        from indexed_map.core.set_algebra import intersect
        return intersect(self, other)

    def difference(self, other: "IndexedMap[K, V]") -> "IndexedMap[K, V]":
        from indexed_map.core.set_algebra import difference
        return difference(self, other)

    def __or__(self, other: object) -> "IndexedMap[K, V]":
        if not isinstance(other, IndexedMap):
            return NotImplemented
        return self.union(other)

    def __and__(self, other: object) -> "IndexedMap[K, V]":
        if not isinstance(other, IndexedMap):
            return NotImplemented
        return self.intersect(other)

    def __sub__(self, other: object) -> "IndexedMap[K, V]":
        if not isinstance(other, IndexedMap):
            return NotImplemented
        return self.difference(other)


def _restore(projection: Projection, backing: SortedDict) -> IndexedMap:
    """Unpickling hook; the pickled backing already satisfies key derivation."""
    return IndexedMap._wrap(projection, backing)
