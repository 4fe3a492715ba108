"""IndexedMap walkthrough — `python -m indexed_map`.

Invariants:
    - Logging configured once from Settings before anything is logged
    - Exit code 0 only if the final map keeps every key equal to projection(value)

Design Decisions:
    - pydantic records as values: by_id keys them, model_dump / model_validate
      drive the snapshot round-trip
"""

import logging
import sys

from pydantic import BaseModel

from indexed_map.config import get_settings
from indexed_map.core.indexed_map import IndexedMap
from indexed_map.core.invariant_audit import check_invariant, find_violations, repair
from indexed_map.core.snapshot import from_snapshot, to_snapshot
from indexed_map.core.projections import by_id
from indexed_map.core.errors import IndexedMapError
from indexed_map.infrastructure.observability import setup_logging

logger = logging.getLogger("indexed_map.demo")


class User(BaseModel):
    id: str
    name: str
    team: str


def _users(count: int) -> list[User]:
    teams = ("core", "infra")
    return [
        User(id=f"u{i:03d}", name=f"User {i}", team=teams[i % len(teams)])
        for i in range(count)
    ]


def run_demo(count: int) -> IndexedMap:
    """Exercise the container end to end; returns the final, audited map."""
    users = IndexedMap.from_records(_users(count))
    logger.info("Built map from records", extra={"size_after": users.size()})

    renamed = users.insert(User(id="u000", name="Renamed", team="core"))
    logger.info(
        "Insert replaced existing entry",
        extra={"key": "u000", "size_before": users.size(), "size_after": renamed.size()},
    )

    core, infra = renamed.partition(lambda _k, u: u.team == "core")
    logger.info(
        "Partitioned by team",
        extra={"operation": "partition", "size_before": renamed.size(),
               "size_after": core.size() + infra.size()},
    )

    # Unsafe rewrite that changes the projected field: keys go stale.
    stale = renamed.map_values_in_place_unsafe(
        lambda _k, u: u.model_copy(update={"id": u.id.upper()}),
    )
    if find_violations(stale):
        stale = repair(stale)

    restored = from_snapshot(
        by_id, to_snapshot(stale, encode=User.model_dump), decode=User.model_validate,
    )
    return check_invariant(restored | core)


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    try:
        result = run_demo(settings.demo_record_count)
    except IndexedMapError as exc:
        logger.error("Demo failed", extra={"operation": exc.context.operation})
        return 1
    logger.info("Demo finished", extra={"size_after": result.size()})
    return 0


if __name__ == "__main__":
    sys.exit(main())
