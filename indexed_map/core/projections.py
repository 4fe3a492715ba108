"""Projections — stock value -> key functions for the common keying shapes.

Invariants:
    - Every projection here is pure and deterministic
    - by_id accepts attribute-style records and mappings alike

Design Decisions:
    - operator.attrgetter / itemgetter for named fields: C-speed, picklable
"""

import operator
from collections.abc import Callable, Mapping
from typing import Any

from indexed_map.core.domain_types import Identified


def identity(value: Any) -> Any:
    """The value is its own key."""
    return value


def first(pair: tuple) -> Any:
    """Key a `(key, payload)` pair by its first component."""
    return pair[0]


def by_id(record: Identified | Mapping) -> Any:
    """Key a record by its `id` attribute, or its `"id"` entry for mappings."""
    if isinstance(record, Mapping):
        return record["id"]
    return record.id


def by_attr(name: str) -> Callable[[Any], Any]:
    """Projection reading a (dotted) attribute, e.g. `by_attr("owner.email")`."""
    return operator.attrgetter(name)


def by_item(key: Any) -> Callable[[Any], Any]:
    """Projection reading one entry of a mapping or sequence value."""
    return operator.itemgetter(key)
