"""Mutation Outcomes — codes, statuses and error envelopes for each rejection kind."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from eventline.core.mutation_outcomes import (
    CategoryNotFound,
    CategoryRequired,
    ConflictReport,
    EventNotFound,
    OverlapConflict,
    StorageFailure,
)


@dataclass
class _Event:
    id: UUID
    name: str
    starts_at: datetime
    ends_at: datetime
    description: str | None = None
    categories: list = field(default_factory=list)


def _event(name="Standup", hour=10) -> _Event:
    return _Event(
        id=uuid4(), name=name,
        starts_at=datetime(2024, 1, 1, hour),
        ends_at=datetime(2024, 1, 1, hour + 1),
    )


def test_overlap_conflict_envelope_lists_conflicts():
    first = _event()
    outcome = OverlapConflict(conflicts=(first,))
    body = outcome.to_response()["error"]
    assert outcome.http_status == 409
    assert body["code"] == "EVENT_OVERLAP"
    assert body["category"] == "conflict"
    assert body["details"]["conflicts"] == [{
        "id": str(first.id),
        "name": "Standup",
        "starts_at": "2024-01-01T10:00:00",
        "ends_at": "2024-01-01T11:00:00",
    }]


def test_category_not_found_carries_all_missing_ids():
    a, b = uuid4(), uuid4()
    outcome = CategoryNotFound(missing_ids=(a, b))
    body = outcome.to_response()["error"]
    assert outcome.http_status == 400
    assert body["details"]["missing_ids"] == [str(a), str(b)]
    assert str(a) in body["message"] and str(b) in body["message"]


def test_event_not_found_is_404():
    event_id = uuid4()
    outcome = EventNotFound(event_id)
    assert outcome.http_status == 404
    assert outcome.to_response()["error"]["details"] == {"event_id": str(event_id)}


def test_category_required_is_business_rule():
    body = CategoryRequired().to_response()["error"]
    assert body["code"] == "CATEGORY_REQUIRED"
    assert body["category"] == "business_rule"


def test_storage_failure_hides_driver_details():
    body = StorageFailure(operation="commit").to_response()["error"]
    assert body["code"] == "STORAGE_FAILURE"
    assert body["severity"] == "critical"
    assert body["message"] == "Storage is temporarily unavailable"
    assert body["details"] == {"operation": "commit"}


def test_rejections_compare_by_value():
    event_id = uuid4()
    assert EventNotFound(event_id) == EventNotFound(event_id)
    assert CategoryRequired() == CategoryRequired()


def test_conflict_report_from_empty_conflicts():
    report = ConflictReport.from_conflicts([])
    assert report == ConflictReport(has_conflict=False, conflicts=())


def test_conflict_report_from_conflicts():
    first = _event()
    report = ConflictReport.from_conflicts([first])
    assert report.has_conflict is True
    assert report.conflicts == (first,)
