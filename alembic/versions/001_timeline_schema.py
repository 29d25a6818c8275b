"""Timeline schema — categories, events, event_categories, no-overlap constraint.

Revision ID: 001_timeline_schema
Revises: None
Create Date: 2026-10-17

The exclusion constraint is the storage backstop for the single-timeline rule:
two rows whose [starts_at, ends_at) ranges intersect are rejected with
SQLSTATE 23P01. PostgreSQL only; other dialects rely on serialized writers.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_timeline_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "events",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("starts_at < ends_at", name="events_start_before_end"),
    )
    op.create_index("ix_events_starts_at", "events", ["starts_at"])

    op.create_table(
        "event_categories",
        sa.Column(
            "event_id", UUID(as_uuid=True),
            sa.ForeignKey("events.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "category_id", UUID(as_uuid=True),
            sa.ForeignKey("categories.id", ondelete="RESTRICT"), primary_key=True,
        ),
    )

    if op.get_bind().dialect.name == "postgresql":
        op.execute(
            "ALTER TABLE events ADD CONSTRAINT events_no_overlap "
            "EXCLUDE USING gist (tstzrange(starts_at, ends_at, '[)') WITH &&)"
        )


def downgrade() -> None:
    op.drop_table("event_categories")
    op.drop_index("ix_events_starts_at", table_name="events")
    op.drop_table("events")
    op.drop_table("categories")
