"""Error Hierarchy — typed, categorized exceptions for IndexedMap failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Absent keys on get/remove and key collisions are NOT errors; nothing here is
      raised for them
    - Errors that stand in for a builtin (KeyError, TypeError) also subclass it,
      so plain `except KeyError` keeps working
    - to_dict() produces a JSON-safe envelope for logs and callers

Design Decisions:
    - Single hierarchy with IndexedMapError base: callers can catch every
      container failure with one clause
    - ErrorContext as dataclass: operation + key travel with the error without
      coupling the core to the logging setup
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    LOOKUP = "lookup"
    ORDERING = "ordering"
    INVARIANT = "invariant"
    SNAPSHOT = "snapshot"


@dataclass
class ErrorContext:
    """Where the failure happened, for logs and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    key: Any = None
    debug_info: dict[str, Any] | None = None


class IndexedMapError(Exception):
    """Base exception for all IndexedMap errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        """Convert to a JSON-safe error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "operation": self.context.operation,
                    "key": repr(self.context.key) if self.context.key is not None else None,
                    "debug_info": self.context.debug_info,
                },
            }
        }


# ─── Lookup / Ordering Errors ───────────────────────────────────

class MissingKeyError(IndexedMapError, KeyError):
    """Subscript lookup (`m[key]`) on a key with no entry."""
    def __init__(self, key: Any, context: ErrorContext | None = None):
        ctx = context or ErrorContext(operation="getitem")
        ctx.key = key
        super().__init__(
            f"No entry for key {key!r}",
            "MISSING_KEY", ErrorCategory.LOOKUP,
            ErrorSeverity.ERROR, ctx,
        )
        self.key = key


class UnorderableKeyError(IndexedMapError, TypeError):
    """A projection produced a key that cannot be ordered against existing keys."""
    def __init__(self, key: Any, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.key = key
        super().__init__(
            f"Derived key {key!r} cannot be stored (keys must be hashable and "
            f"mutually orderable): {reason}",
            "UNORDERABLE_KEY", ErrorCategory.ORDERING,
            ErrorSeverity.ERROR, ctx,
        )
        self.key = key


# ─── Audit / Snapshot Errors ────────────────────────────────────

class InvariantViolationError(IndexedMapError):
    """Stored keys disagree with the projection of their values."""
    def __init__(self, keys: list[Any], context: ErrorContext | None = None):
        ctx = context or ErrorContext(operation="check_invariant")
        ctx.debug_info = {"violations": len(keys)}
        super().__init__(
            f"{len(keys)} entr{'y' if len(keys) == 1 else 'ies'} stored under a key "
            f"that differs from the value's projection: {keys!r}",
            "INVARIANT_VIOLATION", ErrorCategory.INVARIANT,
            ErrorSeverity.CRITICAL, ctx,
        )
        self.keys = keys


class SnapshotVersionError(IndexedMapError):
    """Snapshot was written by an unknown format version."""
    def __init__(self, version: Any, context: ErrorContext | None = None):
        super().__init__(
            f"Unsupported snapshot version: {version!r}",
            "SNAPSHOT_VERSION", ErrorCategory.SNAPSHOT,
            ErrorSeverity.ERROR, context or ErrorContext(operation="from_snapshot"),
        )
        self.version = version
