"""EventCategory ORM — association rows linking events to categories.

Invariants:
    - (event_id, category_id) is the primary key: one row per pair
    - Deleting an event cascades to its rows; deleting a category in use is refused
    - Rows are only written inside the mutation coordinator's transaction

Design Decisions:
    - No surrogate id: the pair IS the identity
    - The coordinator deletes rows explicitly too, so SQLite (no FK enforcement
      by default) behaves like PostgreSQL
"""

import uuid

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from eventline.db.base import Base


class EventCategory(Base):
    """Many-to-many link between Event and Category."""
    __tablename__ = "event_categories"

    event_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        primary_key=True,
    )
