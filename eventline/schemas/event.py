"""Event Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - EventWrite.name: 1-255 chars, stripped, non-empty
    - EventWrite.starts_at strictly precedes ends_at; both bounds naive or both aware
    - EventWrite.category_ids deduplicated, order preserved
    - Response models read straight from ORM rows (from_attributes)

Design Decisions:
    - Structural checks live here; semantic checks (category existence, overlap,
      event existence) belong to the mutation coordinator
    - Minimum category count is NOT enforced here: it is the configurable
      require_event_category policy in the core
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from eventline.core.domain_types import EventDraft
from eventline.core.intervals import interval_error


class EventWrite(BaseModel):
    """Create/update body — full replace, not a partial patch."""
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    starts_at: datetime
    ends_at: datetime
    category_ids: list[UUID] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("category_ids")
    @classmethod
    def dedupe_category_ids(cls, v: list[UUID]) -> list[UUID]:
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def validate_interval(self):
        problem = interval_error(self.starts_at, self.ends_at)
        if problem is not None:
            raise ValueError(problem)
        return self

    def to_draft(self) -> EventDraft:
        return EventDraft.build(
            name=self.name,
            description=self.description,
            starts_at=self.starts_at,
            ends_at=self.ends_at,
            category_ids=self.category_ids,
        )


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class ConflictingEvent(BaseModel):
    """Slim event view used in overlap previews."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    starts_at: datetime
    ends_at: datetime


class EventResponse(BaseModel):
    """Event response — event row plus its categories."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    starts_at: datetime
    ends_at: datetime
    categories: list[CategoryResponse]


class OverlapCheckResponse(BaseModel):
    has_conflict: bool
    conflicts: list[ConflictingEvent]


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    total_pages: int


class EventListResponse(BaseModel):
    events: list[EventResponse]
    pagination: Pagination
