"""Domain Types — identity types and the event draft that flows into the coordinator.

Invariants:
    - EventId, CategoryId wrap UUIDs — never use bare UUID in domain logic
    - EventDraft.category_ids is a frozenset: order and duplicates carry no meaning

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - EventDraft is frozen: the same draft can be retried without defensive copies
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

EventId = NewType("EventId", UUID)
CategoryId = NewType("CategoryId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class EventDraft:
    """Full-replace payload for create/update. Structurally validated upstream."""

    name: str
    starts_at: datetime
    ends_at: datetime
    description: str | None = None
    category_ids: frozenset[CategoryId] = frozenset()

    @classmethod
    def build(
        cls,
        name: str,
        starts_at: datetime,
        ends_at: datetime,
        description: str | None = None,
        category_ids: Iterable[UUID] = (),
    ) -> "EventDraft":
        return cls(
            name=name,
            starts_at=starts_at,
            ends_at=ends_at,
            description=description,
            category_ids=frozenset(CategoryId(c) for c in category_ids),
        )
