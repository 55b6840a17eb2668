"""Database Session Manager: error mapping, readiness, engine options."""

import pytest
from sqlalchemy import text

from dashboard.core.errors import DatabaseError, ResourceNotFoundError
from dashboard.db.base import Base
from dashboard.infrastructure.database import DatabaseSessionManager, _engine_options

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def manager():
    manager = DatabaseSessionManager(MEMORY_URL)
    yield manager
    await manager.dispose()


async def test_failed_read_becomes_database_error(manager):
    with pytest.raises(DatabaseError) as exc_info:
        async with manager.session() as db:
            await db.execute(text("SELECT amount FROM no_such_table"))

    assert exc_info.value.http_status == 503
    assert exc_info.value.operation == "query"


async def test_domain_errors_pass_through_session(manager):
    with pytest.raises(ResourceNotFoundError):
        async with manager.session():
            raise ResourceNotFoundError("Invoice", "missing")


async def test_health_check_requires_invoice_schema(manager):
    assert await manager.health_check() is False

    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    assert await manager.health_check() is True


def test_sqlite_engine_gets_no_pool_sizing():
    assert _engine_options(MEMORY_URL, 20, 10) == {}


def test_postgres_engine_gets_pool_settings():
    options = _engine_options("postgresql+asyncpg://u:p@db/acme", 5, 2)
    assert options["pool_size"] == 5
    assert options["max_overflow"] == 2
    assert options["pool_pre_ping"] is True
