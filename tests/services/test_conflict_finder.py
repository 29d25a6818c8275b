"""Conflict Finder — overlap queries against persisted events.

Invariants:
    - Touching boundaries are not conflicts
    - Results ordered by start time
    - exclude_event_id removes exactly one event
    - Advisory check with a missing bound is "no conflict"
    - SQL and Python renditions of the predicate agree
"""

from datetime import datetime
from uuid import uuid4

import pytest

from eventline.core.intervals import overlaps
from eventline.models import Event
from eventline.services.conflict_finder import (
    check_overlap, find_conflicts, has_conflict,
)


@pytest.fixture
async def timeline(test_db, at):
    """Three events: 09-10, 10-11, 13-14."""
    events = [
        Event(name="Breakfast", starts_at=at(9), ends_at=at(10)),
        Event(name="Talk", starts_at=at(10), ends_at=at(11)),
        Event(name="Lunch", starts_at=at(13), ends_at=at(14)),
    ]
    test_db.add_all(events)
    await test_db.commit()
    return events


async def test_finds_intersecting_events_in_start_order(test_db, timeline, at):
    conflicts = await find_conflicts(test_db, at(9, 30), at(13, 30))
    assert [e.name for e in conflicts] == ["Breakfast", "Talk", "Lunch"]


async def test_touching_boundaries_do_not_conflict(test_db, timeline, at):
    assert await find_conflicts(test_db, at(11), at(13)) == []
    assert await has_conflict(test_db, at(11), at(13)) is False


async def test_partial_overlap_detected(test_db, timeline, at):
    conflicts = await find_conflicts(test_db, at(10, 30), at(11, 30))
    assert [e.name for e in conflicts] == ["Talk"]
    assert await has_conflict(test_db, at(10, 30), at(11, 30)) is True


async def test_exclude_event_id_skips_only_that_event(test_db, timeline, at):
    talk = timeline[1]
    conflicts = await find_conflicts(
        test_db, at(9, 30), at(10, 30), exclude_event_id=talk.id,
    )
    assert [e.name for e in conflicts] == ["Breakfast"]
    assert await has_conflict(
        test_db, talk.starts_at, talk.ends_at, exclude_event_id=talk.id,
    ) is False


async def test_unknown_exclude_id_changes_nothing(test_db, timeline, at):
    conflicts = await find_conflicts(
        test_db, at(10), at(11), exclude_event_id=uuid4(),
    )
    assert [e.name for e in conflicts] == ["Talk"]


async def test_empty_timeline_has_no_conflicts(test_db, at):
    assert await find_conflicts(test_db, at(0), at(23)) == []


async def test_check_overlap_without_bounds_is_no_conflict(test_db, timeline, at):
    for starts_at, ends_at in ((None, None), (at(10), None), (None, at(11))):
        report = await check_overlap(test_db, starts_at, ends_at)
        assert report.has_conflict is False
        assert report.conflicts == ()


async def test_check_overlap_reports_conflicts(test_db, timeline, at):
    report = await check_overlap(test_db, at(10, 15), at(10, 45))
    assert report.has_conflict is True
    assert [e.name for e in report.conflicts] == ["Talk"]


@pytest.mark.parametrize(
    "start, end",
    [((8, 0), (9, 0)), ((8, 0), (9, 1)), ((10, 59), (11, 0)), ((11, 0), (13, 0)), ((12, 0), (15, 0))],
)
async def test_sql_predicate_matches_python_predicate(test_db, timeline, at, start, end):
    candidate = (at(*start), at(*end))
    found = {e.id for e in await find_conflicts(test_db, *candidate)}
    expected = {
        e.id for e in timeline
        if overlaps(e.starts_at, e.ends_at, *candidate)
    }
    assert found == expected
    assert all(e.overlaps_interval(*candidate) for e in timeline if e.id in found)


def test_hybrid_overlaps_interval_on_instance():
    event = Event(
        name="x",
        starts_at=datetime(2024, 1, 1, 10),
        ends_at=datetime(2024, 1, 1, 11),
    )
    assert event.overlaps_interval(datetime(2024, 1, 1, 10, 30), datetime(2024, 1, 1, 12))
    assert not event.overlaps_interval(datetime(2024, 1, 1, 11), datetime(2024, 1, 1, 12))
