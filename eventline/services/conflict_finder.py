"""Conflict Finder — which persisted events intersect a candidate interval.

Invariants:
    - Read-only: never flushes, never commits
    - Overlap test is Event.overlaps_interval (same predicate as core.intervals.overlaps)
    - Results ordered by starts_at ascending, ties by id (deterministic)
    - exclude_event_id keeps an event from conflicting with itself on update
    - check_overlap with a missing bound answers "no conflict" without querying

Design Decisions:
    - has_conflict uses LIMIT 1: the write path only needs existence
    - check_overlap is advisory: runs on any session, no transactional guarantee
      against concurrent writers (the coordinator re-checks under its lock)
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventline.core.mutation_outcomes import ConflictReport
from eventline.models import Event


def _conflict_query(
    starts_at: datetime, ends_at: datetime, exclude_event_id: UUID | None,
):
    query = select(Event).where(Event.overlaps_interval(starts_at, ends_at))
    if exclude_event_id is not None:
        query = query.where(Event.id != exclude_event_id)
    return query


async def find_conflicts(
    db: AsyncSession,
    starts_at: datetime,
    ends_at: datetime,
    exclude_event_id: UUID | None = None,
) -> list[Event]:
    """Every event intersecting [starts_at, ends_at), earliest first."""
    result = await db.execute(
        _conflict_query(starts_at, ends_at, exclude_event_id)
        .order_by(Event.starts_at.asc(), Event.id.asc()),
    )
    return list(result.scalars().all())


async def has_conflict(
    db: AsyncSession,
    starts_at: datetime,
    ends_at: datetime,
    exclude_event_id: UUID | None = None,
) -> bool:
    result = await db.execute(
        _conflict_query(starts_at, ends_at, exclude_event_id)
        .with_only_columns(Event.id)
        .limit(1),
    )
    return result.first() is not None


async def check_overlap(
    db: AsyncSession,
    starts_at: datetime | None,
    ends_at: datetime | None,
    exclude_event_id: UUID | None = None,
) -> ConflictReport:
    """Advisory preview. Absent bounds mean no proposed interval, hence no conflict."""
    if starts_at is None or ends_at is None:
        return ConflictReport(has_conflict=False)
    conflicts = await find_conflicts(db, starts_at, ends_at, exclude_event_id)
    return ConflictReport.from_conflicts(conflicts)
