"""Async Session Factory — the one place sessions are configured.

Invariants:
    - expire_on_commit=False everywhere: rows handed back after commit stay readable

Design Decisions:
    - Separate from infrastructure/database.py: test fixtures need a bare engine +
      factory pair they can hand to DatabaseSessionManager.from_engine()
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


def session_factory_for(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
