"""Category Validator — confirms every requested category id exists.

Invariants:
    - Reports ALL missing ids in one CategoryNotFound, never just the first
    - Empty input is accepted here; the zero-categories policy belongs to the coordinator
"""

from typing import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventline.core.category_membership import find_missing_categories
from eventline.core.mutation_outcomes import CategoryNotFound
from eventline.models import Category


async def validate_categories(
    db: AsyncSession, category_ids: Iterable[UUID],
) -> CategoryNotFound | None:
    """Return CategoryNotFound listing unknown ids, or None when all resolve."""
    requested = set(category_ids)
    if not requested:
        return None
    result = await db.execute(
        select(Category.id).where(Category.id.in_(requested)),
    )
    missing = find_missing_categories(requested, result.scalars().all())
    if missing:
        return CategoryNotFound(missing_ids=missing)
    return None
