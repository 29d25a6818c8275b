"""Event Routes — thin HTTP translation over the mutation coordinator and event queries.

Invariants:
    - Request bodies structurally validated by Pydantic before reaching handlers
    - Every write goes through EventMutationCoordinator; routes never touch rows directly
    - Coordinator outcomes dispatched by type: success -> response model,
      rejection -> its own error envelope and HTTP status
    - /check-overlap is advisory and answers "no conflict" when a bound is missing;
      a reversed or mixed-offset interval is a 400

Design Decisions:
    - /check-overlap registered before /{event_id} so the literal path wins
    - PUT (not PATCH): update is a full replace of name, description, interval, categories
"""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from eventline.config import Settings, get_settings
from eventline.core.errors import ResourceNotFoundError
from eventline.core.intervals import interval_error
from eventline.core.mutation_outcomes import (
    EventCommitted, EventDeleted, Rejection,
)
from eventline.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from eventline.schemas.event import (
    ConflictingEvent,
    EventListResponse,
    EventResponse,
    EventWrite,
    OverlapCheckResponse,
    Pagination,
)
from eventline.services.event_mutation import EventMutationCoordinator
from eventline.services.event_queries import list_events, load_event

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/events", tags=["events"])


def get_coordinator(
    db_manager: DatabaseSessionManager = Depends(get_db_manager),
    settings: Settings = Depends(get_settings),
) -> EventMutationCoordinator:
    return EventMutationCoordinator(
        db_manager, require_category=settings.require_event_category,
    )


def _rejection_response(rejection: Rejection) -> JSONResponse:
    return JSONResponse(
        status_code=rejection.http_status, content=rejection.to_response(),
    )


def _parse_category_filter(raw: str | None) -> list[UUID] | None:
    if not raw:
        return None
    try:
        return [UUID(part.strip()) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail="category_ids must be a comma-separated list of UUIDs",
        )


@router.get("/check-overlap", response_model=OverlapCheckResponse)
async def check_overlap(
    starts_at: datetime | None = Query(None),
    ends_at: datetime | None = Query(None),
    exclude_event_id: UUID | None = Query(None),
    coordinator: EventMutationCoordinator = Depends(get_coordinator),
):
    """Advisory preview: would this interval conflict with the timeline?"""
    if starts_at is not None and ends_at is not None:
        problem = interval_error(starts_at, ends_at)
        if problem is not None:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=problem)
    report = await coordinator.preview(starts_at, ends_at, exclude_event_id)
    return OverlapCheckResponse(
        has_conflict=report.has_conflict,
        conflicts=[ConflictingEvent.model_validate(e) for e in report.conflicts],
    )


@router.get("", response_model=EventListResponse)
async def get_events(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    category_ids: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List events by start time, optionally filtered by category."""
    page = await list_events(
        db, limit=limit, offset=offset,
        category_ids=_parse_category_filter(category_ids),
    )
    return EventListResponse(
        events=[EventResponse.model_validate(e) for e in page.events],
        pagination=Pagination(
            total=page.total, limit=page.limit, offset=page.offset,
            total_pages=page.total_pages,
        ),
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: UUID, db: AsyncSession = Depends(get_db)):
    event = await load_event(db, event_id)
    if event is None:
        raise ResourceNotFoundError("Event", str(event_id))
    return EventResponse.model_validate(event)


@router.post(
    "", response_model=EventResponse, status_code=status.HTTP_201_CREATED,
)
async def create_event(
    body: EventWrite,
    coordinator: EventMutationCoordinator = Depends(get_coordinator),
):
    """Create an event if its interval is free and its categories exist."""
    outcome = await coordinator.create(body.to_draft())
    if isinstance(outcome, EventCommitted):
        return EventResponse.model_validate(outcome.event)
    return _rejection_response(outcome)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    body: EventWrite,
    coordinator: EventMutationCoordinator = Depends(get_coordinator),
):
    """Replace an event's fields, interval and categories."""
    outcome = await coordinator.update(event_id, body.to_draft())
    if isinstance(outcome, EventCommitted):
        return EventResponse.model_validate(outcome.event)
    return _rejection_response(outcome)


@router.delete("/{event_id}")
async def delete_event(
    event_id: UUID,
    coordinator: EventMutationCoordinator = Depends(get_coordinator),
):
    outcome = await coordinator.delete(event_id)
    if isinstance(outcome, EventDeleted):
        return {"message": "Event deleted", "id": str(outcome.event_id)}
    return _rejection_response(outcome)
