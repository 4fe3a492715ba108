"""IndexedMap filtering — tests for keep / reject / partition.

Tests cover:
    - keep and reject are complements
    - predicates receive (key, value)
    - partition outputs are disjoint, cover the input, share the projection
"""

import pytest

from indexed_map.core.indexed_map import IndexedMap
from indexed_map.core import projections


def _numbers() -> IndexedMap:
    return IndexedMap.from_values(projections.identity, range(10))


def _is_even(key, _value) -> bool:
    return key % 2 == 0


def test_keep_selects_matching_entries():
    assert list(_numbers().keep(_is_even).keys()) == [0, 2, 4, 6, 8]


def test_reject_selects_non_matching_entries():
    assert list(_numbers().reject(_is_even).keys()) == [1, 3, 5, 7, 9]


def test_keep_and_reject_share_projection():
    m = _numbers()
    assert m.keep(_is_even).projection is m.projection
    assert m.reject(_is_even).projection is m.projection


def test_predicate_receives_key_and_value():
    m = IndexedMap.from_pairs([("a", 1), ("b", 2)])
    kept = m.keep(lambda k, v: k == "b" and v == ("b", 2))
    assert list(kept.keys()) == ["b"]


def test_partition_matches_keep_and_reject():
    m = _numbers()
    matching, rest = m.partition(_is_even)
    assert matching == m.keep(_is_even)
    assert rest == m.reject(_is_even)


@pytest.mark.parametrize("predicate", [
    _is_even,
    lambda k, _v: k > 6,
    lambda _k, _v: True,
    lambda _k, _v: False,
])
def test_partition_is_disjoint_and_complete(predicate):
    m = _numbers()
    matching, rest = m.partition(predicate)
    assert set(matching.keys()).isdisjoint(rest.keys())
    assert set(matching.keys()) | set(rest.keys()) == set(m.keys())
    assert matching.projection is m.projection
    assert rest.projection is m.projection


def test_partition_of_empty_map():
    matching, rest = IndexedMap.empty(projections.identity).partition(_is_even)
    assert matching.is_empty()
    assert rest.is_empty()
