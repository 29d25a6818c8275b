"""Database Session Manager — async pool, serialized timeline writes, automatic rollback.

Invariants:
    - Every session auto-rolls-back on exception and is closed on every exit path,
      including task cancellation (no transaction is left open)
    - write_transaction() admits at most one create/update transaction at a time:
      a process-local asyncio.Lock, plus pg_advisory_xact_lock on PostgreSQL so
      writers in other processes are serialized too
    - Lock and connection acquisition are bounded (write_lock_timeout, pool_timeout)
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py); an
      exclusion-constraint violation (SQLSTATE 23P01) becomes OverlapRejectedError

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Callers commit explicitly; anything not committed is rolled back by close()
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from eventline.core.errors import (
    DatabaseError, OverlapRejectedError, WriteLockTimeoutError,
)
from eventline.db.session import session_factory_for
from eventline.models.event import EXCLUSION_CONSTRAINT_NAME

logger = logging.getLogger(__name__)

# pg_advisory_xact_lock key reserved for timeline writers
TIMELINE_LOCK_KEY = 0x45564E54

EXCLUSION_VIOLATION_SQLSTATE = "23P01"


def _is_exclusion_violation(exc: DBAPIError) -> bool:
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate == EXCLUSION_VIOLATION_SQLSTATE:
        return True
    return EXCLUSION_CONSTRAINT_NAME in str(exc.orig)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and writer serialization."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_timeout: float = 30,
        write_lock_timeout: float = 10.0,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=3600,
            )
        self._setup(create_async_engine(database_url, **engine_kwargs), write_lock_timeout)

    @classmethod
    def from_engine(
        cls, engine: AsyncEngine, write_lock_timeout: float = 10.0,
    ) -> "DatabaseSessionManager":
        """Wrap an existing engine (test fixtures, scripts)."""
        manager = cls.__new__(cls)
        manager._setup(engine, write_lock_timeout)
        return manager

    def _setup(self, engine: AsyncEngine, write_lock_timeout: float) -> None:
        self.engine = engine
        self.write_lock_timeout = write_lock_timeout
        self._writer_lock = asyncio.Lock()
        self._session_factory = session_factory_for(self.engine)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            if _is_exclusion_violation(e):
                logger.warning(f"Timeline exclusion constraint rejected write: {e.orig}")
                raise OverlapRejectedError()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    @asynccontextmanager
    async def write_transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Serialized timeline write. Caller commits; every other exit rolls back."""
        await self._acquire_writer_lock()
        try:
            async with self.session() as session:
                await self._lock_timeline(session)
                yield session
        finally:
            self._writer_lock.release()

    async def _acquire_writer_lock(self) -> None:
        try:
            await asyncio.wait_for(
                self._writer_lock.acquire(), timeout=self.write_lock_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                "Timeline writer lock timed out",
                extra={"operation": "lock", "error_code": "DATABASE_ERROR"},
            )
            raise WriteLockTimeoutError(self.write_lock_timeout)

    async def _lock_timeline(self, session: AsyncSession) -> None:
        """Cross-process writer gate; released automatically at commit/rollback."""
        if self.engine.dialect.name != "postgresql":
            return
        timeout_ms = int(self.write_lock_timeout * 1000)
        await session.execute(text(f"SET LOCAL lock_timeout = {timeout_ms}"))
        await session.execute(
            text("SELECT pg_advisory_xact_lock(:key)"), {"key": TIMELINE_LOCK_KEY},
        )

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    """FastAPI dependency for the session manager (coordinator needs it, not a session)."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for read-only database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
