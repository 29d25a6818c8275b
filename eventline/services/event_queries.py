"""Event Queries — read paths: hydrated single event, paginated listing, categories.

Invariants:
    - load_event always hits storage (populate_existing): after a commit the
      returned row and its categories match what was persisted
    - Listings ordered by starts_at, then id
    - Category filter keeps events tagged with ANY of the given ids
"""

import math
from dataclasses import dataclass
from typing import Sequence
from uuid import UUID

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eventline.models import Category, Event, EventCategory


@dataclass
class EventPage:
    events: Sequence[Event]
    total: int
    limit: int
    offset: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


async def load_event(db: AsyncSession, event_id: UUID) -> Event | None:
    """Fresh read of one event with its categories."""
    result = await db.execute(
        select(Event)
        .where(Event.id == event_id)
        .execution_options(populate_existing=True),
    )
    return result.scalar_one_or_none()


async def list_events(
    db: AsyncSession,
    limit: int = 10,
    offset: int = 0,
    category_ids: Sequence[UUID] | None = None,
) -> EventPage:
    query = select(Event)
    count_query = select(func.count()).select_from(Event)
    if category_ids:
        tagged = exists().where(
            EventCategory.event_id == Event.id,
            EventCategory.category_id.in_(category_ids),
        )
        query = query.where(tagged)
        count_query = count_query.where(tagged)

    result = await db.execute(
        query.order_by(Event.starts_at.asc(), Event.id.asc())
        .limit(limit).offset(offset),
    )
    total = (await db.execute(count_query)).scalar_one()
    return EventPage(
        events=list(result.scalars().all()), total=total, limit=limit, offset=offset,
    )


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(select(Category).order_by(Category.name.asc()))
    return list(result.scalars().all())
