"""Association Replacer — exact-set replacement of event_categories rows."""

import pytest
from sqlalchemy import select

from eventline.models import Event, EventCategory
from eventline.services.association_replacer import (
    insert_associations, replace_associations,
)


@pytest.fixture
async def event(test_db, at):
    row = Event(name="Gig", starts_at=at(20), ends_at=at(22))
    test_db.add(row)
    await test_db.commit()
    return row


async def _linked(db, event_id) -> set:
    result = await db.execute(
        select(EventCategory.category_id).where(EventCategory.event_id == event_id),
    )
    return set(result.scalars().all())


async def test_insert_associations_links_each_category_once(test_db, event, categories):
    music, tech = categories["Music"].id, categories["Tech"].id
    await insert_associations(test_db, event.id, [music, tech, music])
    await test_db.commit()
    assert await _linked(test_db, event.id) == {music, tech}


async def test_replace_swaps_to_exact_target_set(test_db, event, categories):
    music, sports, tech = (categories[n].id for n in ("Music", "Sports", "Tech"))
    await insert_associations(test_db, event.id, [music, sports])
    await test_db.commit()

    await replace_associations(test_db, event.id, {sports, tech})
    await test_db.commit()

    assert await _linked(test_db, event.id) == {sports, tech}


async def test_replace_is_idempotent(test_db, event, categories):
    target = {categories["Music"].id, categories["Tech"].id}
    await replace_associations(test_db, event.id, target)
    await replace_associations(test_db, event.id, target)
    await test_db.commit()
    assert await _linked(test_db, event.id) == target


async def test_replace_with_empty_set_clears_links(test_db, event, categories):
    await insert_associations(test_db, event.id, [categories["Music"].id])
    await test_db.commit()
    await replace_associations(test_db, event.id, set())
    await test_db.commit()
    assert await _linked(test_db, event.id) == set()


async def test_replace_leaves_other_events_untouched(test_db, event, categories, at):
    other = Event(name="Match", starts_at=at(8), ends_at=at(9))
    test_db.add(other)
    await test_db.commit()
    music = categories["Music"].id
    await insert_associations(test_db, other.id, [music])
    await test_db.commit()

    await replace_associations(test_db, event.id, {categories["Tech"].id})
    await test_db.commit()

    assert await _linked(test_db, other.id) == {music}


async def test_uncommitted_replace_rolls_back(test_db, event, categories):
    # rollback expires the fixture row; keep the plain id
    event_id = event.id
    music = categories["Music"].id
    await insert_associations(test_db, event_id, [music])
    await test_db.commit()

    await replace_associations(test_db, event_id, {categories["Sports"].id})
    await test_db.rollback()

    assert await _linked(test_db, event_id) == {music}
