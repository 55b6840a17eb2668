"""Database Session Manager: async engine, request-scoped sessions, readiness.

Invariants:
    - A SQLAlchemy error escaping a request session is rolled back and
      re-raised as DatabaseError (503); domain errors pass through untouched
    - Readiness means the invoices table answers, not just that a socket opens
    - SQLite URLs get no pool sizing (tests and local runs); Postgres gets
      pool_pre_ping and recycling

Design Decisions:
    - Singleton db_manager initialized on startup by the FastAPI lifespan
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Form actions commit and roll back themselves; only reads reach the
      mapping in session()
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from dashboard.core.errors import DatabaseError
from dashboard.models.invoice import Invoice

logger = logging.getLogger(__name__)


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


class DatabaseSessionManager:
    """Owns the engine and hands out one session per request."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url, **_engine_options(database_url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Invoice query failed: {e}", exc_info=True)
            raise DatabaseError("Failed to load invoice data", "query") from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when the invoices table can be read (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(select(Invoice.id).limit(1))
            return True
        except (DatabaseError, OSError):
            logger.warning("DB health check failed")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
