"""Interval Predicate — the single definition of "these two time ranges conflict".

Invariants:
    - Intervals are half-open [start, end): touching boundaries do NOT overlap
    - overlaps() is pure, total and symmetric
    - Every conflict test in the codebase goes through overlaps() or its SQL
      rendition Event.overlaps_interval (models/event.py)

Design Decisions:
    - Works on any ordered values (datetimes in production, ints in tests)
    - interval_error() is shared by the request schema, the coordinator and the
      overlap preview: a naive bound never gets compared with an aware one
"""

from datetime import datetime
from typing import Any

from eventline.core.errors import ErrorContext, InvariantViolationError


def overlaps(a_start: Any, a_end: Any, b_start: Any, b_end: Any) -> bool:
    """True when [a_start, a_end) and [b_start, b_end) intersect."""
    return a_start < b_end and a_end > b_start


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def interval_error(starts_at: datetime, ends_at: datetime) -> str | None:
    """Why [starts_at, ends_at) is not a usable interval, or None if it is."""
    if _is_aware(starts_at) != _is_aware(ends_at):
        return "starts_at and ends_at must both carry a UTC offset or both omit it"
    if not starts_at < ends_at:
        return "ends_at must be after starts_at"
    return None


def ensure_valid_interval(
    starts_at: datetime, ends_at: datetime, event_id: str | None = None,
) -> None:
    """Raise if the bounds mix offsets or start does not strictly precede end.

    Request schemas reject such input first, so reaching this is a bug.
    """
    problem = interval_error(starts_at, ends_at)
    if problem is not None:
        raise InvariantViolationError(
            f"Invalid interval [{starts_at.isoformat()}, {ends_at.isoformat()}): {problem}",
            ErrorContext(event_id=event_id, operation="interval_check"),
        )
