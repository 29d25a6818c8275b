"""Event ORM — a named, half-open [starts_at, ends_at) slot on the shared timeline.

Invariants:
    - starts_at < ends_at (check constraint, also on SQLite)
    - No two events overlap: serialized writers in the coordinator, plus the
      events_no_overlap exclusion constraint on PostgreSQL (migration 001)
    - categories is view-only: associations are written through EventCategory rows

Design Decisions:
    - overlaps_interval is a hybrid: instance level delegates to core.intervals.overlaps,
      class level renders the same comparison as SQL so queries and Python agree
      on boundary behavior
    - Exclusion constraint lives in the migration only: it is PostgreSQL DDL and
      would break create_all() on SQLite test databases
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, CheckConstraint, Index, and_
from sqlalchemy.ext.hybrid import hybrid_method
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from eventline.core.intervals import overlaps
from eventline.db.base import Base

EXCLUSION_CONSTRAINT_NAME = "events_no_overlap"


class Event(Base):
    """Event entity — owns its category associations."""
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("starts_at < ends_at", name="events_start_before_end"),
        Index("ix_events_starts_at", "starts_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    starts_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    ends_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    categories: Mapped[list["Category"]] = relationship(
        "Category",
        secondary="event_categories",
        order_by="Category.name",
        lazy="selectin",
        viewonly=True,
    )

    @hybrid_method
    def overlaps_interval(self, starts_at: datetime, ends_at: datetime) -> bool:
        return overlaps(self.starts_at, self.ends_at, starts_at, ends_at)

    @overlaps_interval.expression
    def overlaps_interval(cls, starts_at, ends_at):
        return and_(cls.starts_at < ends_at, cls.ends_at > starts_at)
