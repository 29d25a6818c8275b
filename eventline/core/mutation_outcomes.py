"""Mutation Outcomes — explicit result values returned by the mutation coordinator.

Invariants:
    - Expected domain outcomes are VALUES, never raised
    - Every rejection carries its kind (code) and payload (missing ids, conflicting events)
    - Rejections render the same error envelope as EventlineError.to_response()
    - StorageFailure never exposes driver messages to clients

Design Decisions:
    - Frozen dataclasses + union aliases: callers dispatch with match/isinstance
    - HTTP status lives on the outcome: the API layer stays a thin translator
"""

from dataclasses import dataclass, field
from typing import ClassVar, Union
from uuid import UUID

from eventline.core.errors import (
    ErrorCategory, ErrorSeverity, build_error_envelope,
)
from eventline.core.repository_protocols import EventLike


def summarize_event(event: EventLike) -> dict:
    """Compact JSON-ready view of an event used in conflict payloads."""
    return {
        "id": str(event.id),
        "name": event.name,
        "starts_at": event.starts_at.isoformat(),
        "ends_at": event.ends_at.isoformat(),
    }


# ─── Success ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class EventCommitted:
    """Create/update committed; event is re-read from storage after commit."""
    event: EventLike


@dataclass(frozen=True)
class EventDeleted:
    event_id: UUID


# ─── Rejections ──────────────────────────────────────────────────

class _Rejection:
    code: ClassVar[str]
    http_status: ClassVar[int]
    category: ClassVar[ErrorCategory]
    severity: ClassVar[ErrorSeverity] = ErrorSeverity.WARNING

    @property
    def message(self) -> str:
        raise NotImplementedError

    def details(self) -> dict:
        return {}

    def to_response(self) -> dict:
        return build_error_envelope(
            self.code, self.message, self.category, self.severity,
            details=self.details(),
        )


@dataclass(frozen=True)
class CategoryRequired(_Rejection):
    """Zero categories supplied while require_event_category is on."""
    code: ClassVar[str] = "CATEGORY_REQUIRED"
    http_status: ClassVar[int] = 400
    category: ClassVar[ErrorCategory] = ErrorCategory.BUSINESS_RULE

    @property
    def message(self) -> str:
        return "At least one category is required"


@dataclass(frozen=True)
class CategoryNotFound(_Rejection):
    code: ClassVar[str] = "CATEGORY_NOT_FOUND"
    http_status: ClassVar[int] = 400
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    missing_ids: tuple[UUID, ...] = ()

    @property
    def message(self) -> str:
        return f"Unknown category id(s): {', '.join(str(i) for i in self.missing_ids)}"

    def details(self) -> dict:
        return {"missing_ids": [str(i) for i in self.missing_ids]}


@dataclass(frozen=True)
class OverlapConflict(_Rejection):
    """Candidate interval intersects at least one persisted event."""
    code: ClassVar[str] = "EVENT_OVERLAP"
    http_status: ClassVar[int] = 409
    category: ClassVar[ErrorCategory] = ErrorCategory.CONFLICT

    conflicts: tuple[EventLike, ...] = field(default=())

    @property
    def message(self) -> str:
        return "Time slot overlaps with existing event"

    def details(self) -> dict:
        return {"conflicts": [summarize_event(e) for e in self.conflicts]}


@dataclass(frozen=True)
class EventNotFound(_Rejection):
    code: ClassVar[str] = "EVENT_NOT_FOUND"
    http_status: ClassVar[int] = 404
    category: ClassVar[ErrorCategory] = ErrorCategory.RESOURCE_NOT_FOUND

    event_id: UUID | None = None

    @property
    def message(self) -> str:
        return f"Event '{self.event_id}' not found"

    def details(self) -> dict:
        return {"event_id": str(self.event_id)}


@dataclass(frozen=True)
class StorageFailure(_Rejection):
    """Infrastructure failure. Reported upward, never retried here."""
    code: ClassVar[str] = "STORAGE_FAILURE"
    http_status: ClassVar[int] = 503
    category: ClassVar[ErrorCategory] = ErrorCategory.DATABASE
    severity: ClassVar[ErrorSeverity] = ErrorSeverity.CRITICAL

    operation: str = "unknown"

    @property
    def message(self) -> str:
        return "Storage is temporarily unavailable"

    def details(self) -> dict:
        return {"operation": self.operation}


Rejection = Union[
    CategoryRequired, CategoryNotFound, OverlapConflict, EventNotFound, StorageFailure,
]
MutationResult = Union[
    EventCommitted, CategoryRequired, CategoryNotFound,
    OverlapConflict, EventNotFound, StorageFailure,
]
DeleteResult = Union[EventDeleted, EventNotFound, StorageFailure]


@dataclass(frozen=True)
class ConflictReport:
    """Advisory check answer: best effort, no transactional guarantee."""
    has_conflict: bool
    conflicts: tuple[EventLike, ...] = ()

    @classmethod
    def from_conflicts(cls, conflicts) -> "ConflictReport":
        conflicts = tuple(conflicts)
        return cls(has_conflict=bool(conflicts), conflicts=conflicts)
