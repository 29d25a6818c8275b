"""ORM Models — SQLAlchemy declarative models for the timeline.

Invariants:
    - All models inherit from Base (db/base.py)
    - Event is the aggregate root; EventCategory rows never outlive their event

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from eventline.models.category import Category  # noqa: F401
from eventline.models.event import Event  # noqa: F401
from eventline.models.event_category import EventCategory  # noqa: F401
