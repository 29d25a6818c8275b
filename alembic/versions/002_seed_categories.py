"""Seed the default categories.

Revision ID: 002_seed_categories
Revises: 001_timeline_schema
Create Date: 2026-10-17

Categories are reference data: the mutation core only checks that they exist.
Re-running against a table that already holds a name skips that name.
"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_seed_categories"
down_revision: Union[str, None] = "001_timeline_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_CATEGORIES = ("Music", "Sports", "Tech", "Workshop", "Conference")

_categories = sa.table(
    "categories",
    sa.column("id", UUID(as_uuid=True)),
    sa.column("name", sa.String),
)


def upgrade() -> None:
    bind = op.get_bind()
    existing = set(bind.execute(sa.select(_categories.c.name)).scalars())
    rows = [
        {"id": uuid.uuid4(), "name": name}
        for name in DEFAULT_CATEGORIES
        if name not in existing
    ]
    if rows:
        op.bulk_insert(_categories, rows)


def downgrade() -> None:
    op.execute(
        _categories.delete().where(_categories.c.name.in_(DEFAULT_CATEGORIES)),
    )
