"""Interval Predicate — half-open overlap semantics and the defensive interval check.

Tests cover:
    - overlaps is symmetric
    - touching intervals do not overlap
    - containment and partial overlap do
    - ensure_valid_interval rejects start >= end and bounds that mix offsets
"""

from datetime import datetime, timezone

import pytest

from eventline.core.errors import InvariantViolationError
from eventline.core.intervals import ensure_valid_interval, interval_error, overlaps


# ─── overlaps ────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "a, b, expected",
    [
        ((10, 11), (10, 11), True),     # identical
        ((10, 12), (11, 13), True),     # partial
        ((10, 14), (11, 12), True),     # containment
        ((10, 11), (11, 12), False),    # touching at end
        ((11, 12), (10, 11), False),    # touching at start
        ((10, 11), (12, 13), False),    # disjoint
    ],
)
def test_overlaps_is_symmetric(a, b, expected):
    assert overlaps(*a, *b) is expected
    assert overlaps(*b, *a) is expected


def test_overlaps_with_datetimes_touching_boundary():
    ten = datetime(2024, 1, 1, 10)
    eleven = datetime(2024, 1, 1, 11)
    noon = datetime(2024, 1, 1, 12)
    assert overlaps(ten, eleven, eleven, noon) is False


def test_overlaps_one_minute_intrusion():
    assert overlaps(
        datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 11),
        datetime(2024, 1, 1, 10, 59), datetime(2024, 1, 1, 12),
    ) is True


# ─── ensure_valid_interval ───────────────────────────────────────

def test_ensure_valid_interval_accepts_ordered_bounds():
    ensure_valid_interval(datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 11))


def test_ensure_valid_interval_rejects_equal_bounds():
    ten = datetime(2024, 1, 1, 10)
    with pytest.raises(InvariantViolationError) as exc_info:
        ensure_valid_interval(ten, ten)
    assert exc_info.value.code == "INVARIANT_VIOLATION"
    assert exc_info.value.http_status == 500


def test_ensure_valid_interval_rejects_reversed_bounds_with_event_id():
    with pytest.raises(InvariantViolationError) as exc_info:
        ensure_valid_interval(
            datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 11), event_id="abc",
        )
    assert exc_info.value.context.event_id == "abc"


def test_ensure_valid_interval_rejects_mixed_offsets():
    with pytest.raises(InvariantViolationError, match="UTC offset"):
        ensure_valid_interval(
            datetime(2024, 1, 1, 10, tzinfo=timezone.utc), datetime(2024, 1, 1, 11),
        )


# ─── interval_error ──────────────────────────────────────────────

def test_interval_error_none_for_aware_bounds():
    assert interval_error(
        datetime(2024, 1, 1, 10, tzinfo=timezone.utc),
        datetime(2024, 1, 1, 11, tzinfo=timezone.utc),
    ) is None


def test_interval_error_mixed_offsets_checked_before_ordering():
    problem = interval_error(
        datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 11, tzinfo=timezone.utc),
    )
    assert "UTC offset" in problem


def test_interval_error_reversed_bounds():
    assert interval_error(
        datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 11),
    ) == "ends_at must be after starts_at"
