"""Event Mutation Coordinator — all-or-nothing create/update/delete of timeline events.

Invariants:
    - create/update run validate categories -> conflict check -> row write ->
      association write inside ONE serialized write transaction
      (DatabaseSessionManager.write_transaction); commit only after every step passed
    - Any rejection or failure rolls the whole transaction back: no event row and
      no association row survive a failed create/update
    - Expected outcomes are returned as values (core/mutation_outcomes.py), never raised
    - Successful results are re-read from storage after commit
    - Update excludes the event itself from the conflict check
    - Delete is unconditional: no overlap or category checks, but it still takes the
      writer lock so it never interleaves with an update of the same row
    - An update whose row vanished before the flush reports EventNotFound

Design Decisions:
    - Writer serialization + PostgreSQL exclusion constraint close the
      check-then-write race; a constraint rejection is reported as OverlapConflict
      with the conflicting events re-read in a fresh session
    - Rejections return without commit; session close rolls back and leaves the
      conflicting rows carried in the outcome loaded
    - StorageFailure is not retried here: retry policy belongs to the caller
    - require_category is injected from settings.require_event_category
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from eventline.core.domain_types import EventDraft
from eventline.core.errors import DatabaseError, OverlapRejectedError
from eventline.core.intervals import ensure_valid_interval
from eventline.core.mutation_outcomes import (
    CategoryRequired,
    ConflictReport,
    DeleteResult,
    EventCommitted,
    EventDeleted,
    EventNotFound,
    MutationResult,
    OverlapConflict,
    Rejection,
    StorageFailure,
)
from eventline.infrastructure.database import DatabaseSessionManager
from eventline.models import Event, EventCategory
from eventline.services.association_replacer import (
    insert_associations, replace_associations,
)
from eventline.services.category_validator import validate_categories
from eventline.services.conflict_finder import (
    check_overlap, find_conflicts, has_conflict,
)
from eventline.services.event_queries import load_event

logger = logging.getLogger(__name__)


class EventMutationCoordinator:
    """Owns every write to events and event_categories."""

    def __init__(
        self, db_manager: DatabaseSessionManager, require_category: bool = True,
    ):
        self._db_manager = db_manager
        self._require_category = require_category

    async def create(self, draft: EventDraft) -> MutationResult:
        ensure_valid_interval(draft.starts_at, draft.ends_at)
        try:
            async with self._db_manager.write_transaction() as db:
                rejection = await self._check_draft(db, draft)
                if rejection is not None:
                    return self._rejected("create", rejection)

                event = Event(
                    name=draft.name,
                    description=draft.description,
                    starts_at=draft.starts_at,
                    ends_at=draft.ends_at,
                )
                db.add(event)
                await db.flush()
                await insert_associations(db, event.id, draft.category_ids)
                await db.commit()
                db.expunge_all()
                saved = await load_event(db, event.id)
        except OverlapRejectedError:
            return await self._overlap_from_storage("create", draft)
        except DatabaseError as e:
            return self._storage_failure("create", e)

        return self._committed("create", saved, event.id)

    async def update(self, event_id: UUID, draft: EventDraft) -> MutationResult:
        ensure_valid_interval(draft.starts_at, draft.ends_at, str(event_id))
        try:
            async with self._db_manager.write_transaction() as db:
                event = await db.get(Event, event_id)
                if event is None:
                    return self._rejected("update", EventNotFound(event_id))

                rejection = await self._check_draft(db, draft, exclude_event_id=event_id)
                if rejection is not None:
                    return self._rejected("update", rejection, event_id)

                event.name = draft.name
                event.description = draft.description
                event.starts_at = draft.starts_at
                event.ends_at = draft.ends_at
                event.updated_at = datetime.now(timezone.utc)
                try:
                    await db.flush()
                except StaleDataError:
                    # row deleted outside the writer lock since db.get
                    return self._rejected("update", EventNotFound(event_id), event_id)
                await replace_associations(db, event_id, draft.category_ids)
                await db.commit()
                db.expunge_all()
                saved = await load_event(db, event_id)
        except OverlapRejectedError:
            return await self._overlap_from_storage("update", draft, event_id)
        except DatabaseError as e:
            return self._storage_failure("update", e, event_id)

        return self._committed("update", saved, event_id)

    async def delete(self, event_id: UUID) -> DeleteResult:
        """Remove the event and its associations. Retrying reports EventNotFound."""
        try:
            async with self._db_manager.write_transaction() as db:
                await db.execute(
                    delete(EventCategory).where(EventCategory.event_id == event_id),
                )
                result = await db.execute(delete(Event).where(Event.id == event_id))
                if result.rowcount == 0:
                    return self._rejected("delete", EventNotFound(event_id))
                await db.commit()
        except DatabaseError as e:
            return self._storage_failure("delete", e, event_id)

        logger.info("Event deleted", extra={"event_id": event_id, "operation": "delete"})
        return EventDeleted(event_id)

    async def preview(
        self,
        starts_at: datetime | None,
        ends_at: datetime | None,
        exclude_event_id: UUID | None = None,
    ) -> ConflictReport:
        """Advisory "would this conflict" check outside any write transaction."""
        async with self._db_manager.session() as db:
            return await check_overlap(db, starts_at, ends_at, exclude_event_id)

    # ─── Steps ──────────────────────────────────────────────────

    async def _check_draft(
        self,
        db: AsyncSession,
        draft: EventDraft,
        exclude_event_id: UUID | None = None,
    ) -> Rejection | None:
        if self._require_category and not draft.category_ids:
            return CategoryRequired()

        missing = await validate_categories(db, draft.category_ids)
        if missing is not None:
            return missing

        if await has_conflict(db, draft.starts_at, draft.ends_at, exclude_event_id):
            conflicts = await find_conflicts(
                db, draft.starts_at, draft.ends_at, exclude_event_id,
            )
            return OverlapConflict(conflicts=tuple(conflicts))
        return None

    async def _overlap_from_storage(
        self, operation: str, draft: EventDraft, event_id: UUID | None = None,
    ) -> MutationResult:
        """Exclusion constraint fired: a concurrent writer won the slot."""
        try:
            async with self._db_manager.session() as db:
                conflicts = await find_conflicts(
                    db, draft.starts_at, draft.ends_at, event_id,
                )
        except DatabaseError as e:
            return self._storage_failure(operation, e, event_id)
        return self._rejected(operation, OverlapConflict(conflicts=tuple(conflicts)), event_id)

    # ─── Outcome logging ────────────────────────────────────────

    def _committed(
        self, operation: str, saved: Event | None, event_id: UUID,
    ) -> MutationResult:
        if saved is None:
            # deleted by another request between commit and re-read
            return self._rejected(operation, EventNotFound(event_id), event_id)
        logger.info(
            f"Event {operation}d",
            extra={"event_id": saved.id, "operation": operation},
        )
        return EventCommitted(saved)

    def _rejected(
        self, operation: str, rejection: Rejection, event_id: UUID | None = None,
    ) -> Rejection:
        conflict_count = (
            len(rejection.conflicts) if isinstance(rejection, OverlapConflict) else None
        )
        logger.warning(
            f"Event {operation} rejected: {rejection.message}",
            extra={
                "event_id": event_id,
                "operation": operation,
                "error_code": rejection.code,
                "conflict_count": conflict_count,
            },
        )
        return rejection

    def _storage_failure(
        self, operation: str, error: DatabaseError, event_id: UUID | None = None,
    ) -> StorageFailure:
        logger.error(
            f"Event {operation} failed: {error.message}",
            extra={
                "event_id": event_id,
                "operation": operation,
                "error_code": error.code,
            },
        )
        return StorageFailure(operation=error.operation)
