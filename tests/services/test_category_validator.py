"""Category Validator — existence checks against the categories table."""

from uuid import uuid4

from eventline.core.mutation_outcomes import CategoryNotFound
from eventline.services.category_validator import validate_categories


async def test_existing_categories_pass(test_db, categories):
    ids = {c.id for c in categories.values()}
    assert await validate_categories(test_db, ids) is None


async def test_empty_set_passes(test_db, categories):
    assert await validate_categories(test_db, set()) is None


async def test_reports_all_missing_ids_together(test_db, categories):
    unknown_a, unknown_b = uuid4(), uuid4()
    outcome = await validate_categories(
        test_db, {categories["Music"].id, unknown_a, unknown_b},
    )
    assert isinstance(outcome, CategoryNotFound)
    assert set(outcome.missing_ids) == {unknown_a, unknown_b}


async def test_unknown_id_on_empty_table(test_db):
    unknown = uuid4()
    outcome = await validate_categories(test_db, [unknown])
    assert outcome == CategoryNotFound(missing_ids=(unknown,))
