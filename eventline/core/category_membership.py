"""Category Membership — pure set arithmetic behind the category validator."""

from typing import Iterable
from uuid import UUID


def find_missing_categories(
    requested: Iterable[UUID], existing: Iterable[UUID],
) -> tuple[UUID, ...]:
    """Requested ids absent from existing, sorted so error payloads are deterministic."""
    return tuple(sorted(set(requested) - set(existing), key=str))
