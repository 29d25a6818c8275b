"""Service test fixtures — per-test SQLite database, session manager, coordinator, client.

Invariants:
    - Every test gets a fresh file-backed SQLite database under tmp_path
    - Coordinator and routes share one DatabaseSessionManager built on the test engine
    - get_db / get_db_manager dependencies overridden for route tests

Design Decisions:
    - File-backed rather than :memory:: each session gets its own connection, so
      concurrent transactions in tests behave like separate requests
    - PostgreSQL-only features (exclusion constraint, advisory lock) are not
      exercised here; their error paths are simulated with monkeypatch
"""

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from httpx import ASGITransport, AsyncClient

from eventline.db.base import Base
from eventline.db.session import session_factory_for
from eventline.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from eventline.models import Category
from eventline.services.event_mutation import EventMutationCoordinator
from eventline.main import app


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'timeline.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return session_factory_for(test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine, write_lock_timeout=2.0)


@pytest.fixture
def coordinator(db_manager):
    return EventMutationCoordinator(db_manager)


@pytest.fixture
async def categories(test_session_factory) -> dict[str, Category]:
    """Music, Sports, Tech — keyed by name."""
    rows = {name: Category(name=name) for name in ("Music", "Sports", "Tech")}
    async with test_session_factory() as db:
        db.add_all(rows.values())
        await db.commit()
    return rows


@pytest.fixture
def at():
    """at(10, 30) -> 2024-01-01 10:30, the day every timeline test runs on."""
    def _at(hour: int, minute: int = 0) -> datetime:
        return datetime(2024, 1, 1, hour, minute)
    return _at


@pytest.fixture
async def client(db_manager):
    """FastAPI test client with DB dependencies overridden."""
    async def override_get_db():
        async with db_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_manager] = lambda: db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
