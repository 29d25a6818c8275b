"""Boundary Protocols — structural contracts for persisted rows seen by core.

Invariants:
    - Core NEVER imports from models/ — dependency arrows point inward only
    - Outcome values carry rows typed by these protocols, not ORM classes

Design Decisions:
    - Protocol over ABC: structural subtyping, ORM models satisfy it implicitly
"""

from datetime import datetime
from typing import Protocol, Sequence
from uuid import UUID


class CategoryLike(Protocol):
    """Structural contract for Category rows."""
    id: UUID
    name: str


class EventLike(Protocol):
    """Structural contract for Event rows handed back by the coordinator.

    categories is the hydrated association set, ordered by name.
    """
    id: UUID
    name: str
    description: str | None
    starts_at: datetime
    ends_at: datetime
    categories: Sequence[CategoryLike]
