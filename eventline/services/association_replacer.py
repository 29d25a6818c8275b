"""Association Replacer — writes an event's category links inside the caller's transaction.

Invariants:
    - After replace_associations, the event's rows equal EXACTLY the target set
    - Idempotent: replaying the same target leaves the same rows
    - Never commits: only the mutation coordinator decides commit vs rollback

Design Decisions:
    - Full replace (delete all, insert target) over diffing: simplest correct strategy
"""

from typing import Iterable
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from eventline.models import EventCategory


async def insert_associations(
    db: AsyncSession, event_id: UUID, category_ids: Iterable[UUID],
) -> None:
    """Insert-only form for a freshly created event."""
    db.add_all(
        EventCategory(event_id=event_id, category_id=category_id)
        for category_id in set(category_ids)
    )
    await db.flush()


async def replace_associations(
    db: AsyncSession, event_id: UUID, category_ids: Iterable[UUID],
) -> None:
    await db.execute(
        delete(EventCategory).where(EventCategory.event_id == event_id),
    )
    await insert_associations(db, event_id, category_ids)
