"""Error Hierarchy — typed, categorized exceptions for Eventline failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Exceptions are reserved for programming errors and infrastructure failures;
      expected domain outcomes (overlap, missing category, not found) are values
      in core/mutation_outcomes.py
    - to_response() produces the REST envelope shared with mutation outcomes
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with EventlineError base: FastAPI global handler catches all
    - OverlapRejectedError subclasses DatabaseError: the storage backstop is a
      database failure until the coordinator translates it into OverlapConflict
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


def build_error_envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    details: dict[str, Any] | None = None,
    timestamp: datetime | None = None,
) -> dict:
    """Standard REST error body shared by exceptions and domain outcomes."""
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "timestamp": (timestamp or datetime.now(timezone.utc)).isoformat(),
            "details": details or {},
        }
    }


class EventlineError(Exception):
    """Base exception for all Eventline errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return build_error_envelope(
            self.code, self.message, self.category, self.severity,
            details={
                "event_id": self.context.event_id,
                "operation": self.context.operation,
            },
            timestamp=self.context.timestamp,
        )


# ─── Domain Errors ──────────────────────────────────────────────

class InvariantViolationError(EventlineError):
    """An internal invariant was broken (e.g. an interval with start >= end reached the core)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVARIANT_VIOLATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class ResourceNotFoundError(EventlineError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(EventlineError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation


class OverlapRejectedError(DatabaseError):
    """Storage-level exclusion constraint rejected an overlapping interval."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Interval rejected by timeline exclusion constraint", "commit", context,
        )
        self.code = "OVERLAP_REJECTED"
        self.category = ErrorCategory.CONFLICT
        self.severity = ErrorSeverity.WARNING
        self.http_status = 409


class WriteLockTimeoutError(DatabaseError):
    """Timed out waiting for the timeline writer lock."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Timeline writer lock not acquired within {timeout_seconds}s", "lock", context,
        )
        self.category = ErrorCategory.TIMEOUT
        self.timeout_seconds = timeout_seconds
