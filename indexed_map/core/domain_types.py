"""Domain Types — type variables and structural protocols shared across the core.

Invariants:
    - A Projection is any callable V -> K; it is never introspected
    - Keys produced by a projection must be hashable and mutually orderable
      (K is bound to SupportsLessThan)

Design Decisions:
    - Protocol over ABC: records and projections are matched structurally, so
      dataclasses, pydantic models and plain objects all qualify without inheritance
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar


# ─── Structural Protocols ────────────────────────────────────────

class SupportsLessThan(Protocol):
    """Keys must be totally ordered by `<` to live in the backing SortedDict."""

    def __lt__(self, other: Any) -> bool: ...


class Identified(Protocol):
    """A record exposing its own identifier, used by `projections.by_id`."""

    @property
    def id(self) -> Any: ...


# ─── Type Variables ──────────────────────────────────────────────

K = TypeVar("K", bound=SupportsLessThan)
V = TypeVar("V")
K2 = TypeVar("K2", bound=SupportsLessThan)
V2 = TypeVar("V2")
A = TypeVar("A")


# ─── Callback Shapes ─────────────────────────────────────────────

Projection = Callable[[V], K]               # value -> derived key
Rewrite = Callable[[K, V], V2]              # (key, value) -> new value
EntryPredicate = Callable[[K, V], bool]     # (key, value) -> keep?
