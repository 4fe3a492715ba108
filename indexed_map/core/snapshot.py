"""IndexedMap Snapshot — serialization / deserialization of an IndexedMap's values.

Invariants:
    - to_snapshot produces {"version": 1, "values": [...]}, values in ascending key order
    - Keys and the projection are never stored; from_snapshot re-derives keys
    - A snapshot missing "values" restores to an empty map (forward-compatible)

Design Decisions:
    - Values only: storing keys would let a stale or edited snapshot pair a key
      with a value that disagrees, and projections are arbitrary callables
    - encode/decode hooks keep this module JSON-agnostic (e.g. model_dump /
      model_validate for pydantic records)
"""

from collections.abc import Callable
from typing import Any

from indexed_map.core.domain_types import Projection
from indexed_map.core.errors import SnapshotVersionError
from indexed_map.core.indexed_map import IndexedMap

SNAPSHOT_VERSION = 1


def to_snapshot(
    imap: IndexedMap, encode: Callable[[Any], Any] | None = None,
) -> dict:
    """Serialize values to a dict. Pure, no IO."""
    values = list(imap.values())
    if encode is not None:
        values = [encode(v) for v in values]
    return {"version": SNAPSHOT_VERSION, "values": values}


def from_snapshot(
    projection: Projection,
    snapshot: dict,
    decode: Callable[[Any], Any] | None = None,
) -> IndexedMap:
    """Restore an IndexedMap keyed by `projection` from a snapshot dict."""
    version = snapshot.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise SnapshotVersionError(version)
    values = snapshot.get("values", [])
    if decode is not None:
        values = (decode(v) for v in values)
    return IndexedMap.from_values(projection, values)
