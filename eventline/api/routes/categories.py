"""Category Routes — read-only listing of the category reference data."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventline.infrastructure.database import get_db
from eventline.schemas.event import CategoryResponse
from eventline.services.event_queries import list_categories

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def get_categories(db: AsyncSession = Depends(get_db)):
    """All categories, ordered by name."""
    return [CategoryResponse.model_validate(c) for c in await list_categories(db)]
