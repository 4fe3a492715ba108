"""IndexedMap mutation — tests for insert / remove and friends.

Tests cover:
    - insert derives the key and replaces an existing entry (size unchanged)
    - remove of an absent key returns an equal map
    - every mutation returns a new map and leaves the original untouched
    - insert_many, remove_value, adjust
    - keys that cannot be ordered raise UnorderableKeyError (a TypeError)
    - copy, deepcopy and pickle round-trips
"""

import copy
import pickle

import pytest

from indexed_map.core.errors import UnorderableKeyError
from indexed_map.core.indexed_map import IndexedMap
from indexed_map.core import projections


# ─── insert ──────────────────────────────────────────────────────

def test_insert_same_key_replaces_entry():
    m = IndexedMap.empty(projections.by_id)
    m = m.insert({"id": "a", "name": "Alice"})
    m = m.insert({"id": "a", "name": "Alicia"})
    assert m.size() == 1
    assert m.get("a") == {"id": "a", "name": "Alicia"}


def test_insert_new_key_grows_map():
    m = IndexedMap.singleton(projections.by_id, {"id": "a"})
    assert m.insert({"id": "b"}).size() == 2


def test_insert_leaves_original_untouched():
    original = IndexedMap.singleton(projections.by_id, {"id": "a", "v": 1})
    updated = original.insert({"id": "b", "v": 2})
    assert original.to_pairs() == [("a", {"id": "a", "v": 1})]
    assert updated is not original
    assert updated.size() == 2


def test_insert_many_is_last_write_wins():
    m = IndexedMap.empty(projections.first)
    m = m.insert_many([("k", 1), ("j", 2), ("k", 3)])
    assert m.to_pairs() == [("j", ("j", 2)), ("k", ("k", 3))]


# ─── remove ──────────────────────────────────────────────────────

def test_remove_absent_key_is_noop():
    m = IndexedMap.from_pairs([("k", "v")])
    assert m.remove("zz") == m
    assert m.remove("zz").to_pairs() == [("k", ("k", "v"))]


def test_remove_present_key():
    m = IndexedMap.from_pairs([("k", "v"), ("j", "w")])
    removed = m.remove("k")
    assert list(removed.keys()) == ["j"]
    assert list(m.keys()) == ["j", "k"]


def test_remove_value_uses_derived_key():
    m = IndexedMap.from_pairs([("k", "v"), ("j", "w")])
    assert list(m.remove_value(("k", "anything")).keys()) == ["j"]


# ─── adjust ──────────────────────────────────────────────────────

def test_adjust_rewrites_single_entry():
    m = IndexedMap.from_records([{"id": 1, "n": "a"}, {"id": 2, "n": "b"}])
    adjusted = m.adjust(1, lambda r: {**r, "n": "A"})
    assert adjusted[1] == {"id": 1, "n": "A"}
    assert adjusted[2] == {"id": 2, "n": "b"}


def test_adjust_refiles_value_under_new_derived_key():
    m = IndexedMap.from_records([{"id": 1}, {"id": 2}])
    adjusted = m.adjust(1, lambda r: {"id": 5})
    assert list(adjusted.keys()) == [2, 5]
    assert all(k == v["id"] for k, v in adjusted.items())


def test_adjust_onto_existing_key_collapses():
    m = IndexedMap.from_records([{"id": 1}, {"id": 2, "tag": "old"}])
    adjusted = m.adjust(1, lambda r: {"id": 2, "tag": "moved"})
    assert adjusted.to_pairs() == [(2, {"id": 2, "tag": "moved"})]


def test_adjust_absent_key_is_noop():
    m = IndexedMap.from_records([{"id": 1}])
    assert m.adjust(9, lambda r: {"id": 10}) == m


# ─── Key ordering failures ───────────────────────────────────────

def test_mixed_key_types_raise_unorderable_key_error():
    m = IndexedMap.singleton(projections.identity, 1)
    with pytest.raises(UnorderableKeyError) as excinfo:
        m.insert("one")
    assert excinfo.value.key == "one"
    assert excinfo.value.context.operation == "insert"
    assert isinstance(excinfo.value.__cause__, TypeError)


def test_unhashable_key_raises_type_error():
    with pytest.raises(TypeError):
        IndexedMap.from_values(projections.identity, [[1, 2]])


def test_failed_insert_leaves_original_intact():
    m = IndexedMap.singleton(projections.identity, 1)
    with pytest.raises(UnorderableKeyError):
        m.insert("one")
    assert m.to_pairs() == [(1, 1)]


# ─── Copying ─────────────────────────────────────────────────────

def test_copy_returns_same_instance():
    m = IndexedMap.from_values(projections.identity, [1])
    assert copy.copy(m) is m


def test_deepcopy_keeps_entries_and_projection():
    m = IndexedMap.from_records([{"id": 1, "tags": ["x"]}])
    clone = copy.deepcopy(m)
    assert clone == m
    assert clone.projection is m.projection
    assert clone[1] is not m[1]


def test_deepcopy_resolves_values_referring_back_to_the_map():
    """A value holding the map itself points at the clone, not a second copy."""
    box = ["k"]
    m = IndexedMap.singleton(projections.by_item(0), box)
    box.append(m)
    clone = copy.deepcopy(m)
    assert clone["k"][1] is clone
    assert clone["k"] is not box


def test_deepcopy_registers_clone_in_memo():
    m = IndexedMap.from_values(projections.identity, [1])
    memo = {}
    clone = copy.deepcopy(m, memo)
    assert memo[id(m)] is clone


# ─── Pickling ────────────────────────────────────────────────────

@pytest.mark.parametrize("projection, values", [
    (projections.identity, [2, 1]),
    (projections.first, [("b", 2), ("a", 1)]),
    (projections.by_id, [{"id": 2}, {"id": 1}]),
    (projections.by_item("sku"), [{"sku": "X-2"}, {"sku": "X-1"}]),
])
def test_pickle_round_trip(projection, values):
    m = IndexedMap.from_values(projection, values)
    restored = pickle.loads(pickle.dumps(m))
    assert restored == m
    assert list(restored.keys()) == list(m.keys())


def test_unpickled_map_keeps_deriving_keys():
    """The restored projection still files new values under derived keys."""
    restored = pickle.loads(pickle.dumps(IndexedMap.from_records([{"id": 1}])))
    assert restored.insert({"id": 0}).to_pairs() == [(0, {"id": 0}), (1, {"id": 1})]
    with pytest.raises(AttributeError):
        restored._backing = {}
