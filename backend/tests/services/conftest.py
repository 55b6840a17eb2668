"""Service test fixtures: async DB, page cache, seeded rows, FastAPI test clients.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and get_page_cache dependencies overridden per test
    - `client` is signed in (require_user overridden); `anon_client` is not
"""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from dashboard.api.dependencies import require_user
from dashboard.db.base import Base
from dashboard.infrastructure.credentials_provider import hash_password
from dashboard.infrastructure.database import get_db
from dashboard.infrastructure.page_cache import PageCache, get_page_cache
from dashboard.main import app
from dashboard.models import Customer, Invoice, User

TEST_PASSWORD = "123456"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def cache():
    return PageCache()


def _override_dependencies(test_session_factory, cache):
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_page_cache] = lambda: cache


@pytest.fixture
async def anon_client(test_session_factory, cache):
    """Test client without a signed-in user."""
    _override_dependencies(test_session_factory, cache)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_session_factory, cache):
    """Test client whose requests pass the session guard."""
    _override_dependencies(test_session_factory, cache)
    app.dependency_overrides[require_user] = lambda: "test-user"
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def seed_customer(test_db):
    customer = Customer(
        name="Evil Rabbit", email="evil@rabbit.com",
        image_url="/customers/evil-rabbit.png",
    )
    test_db.add(customer)
    await test_db.commit()
    await test_db.refresh(customer)
    return customer


@pytest.fixture
async def seed_invoice(test_db, seed_customer):
    invoice = Invoice(
        customer_id=seed_customer.id, amount=15795,
        status="pending", date=date(2022, 12, 6),
    )
    test_db.add(invoice)
    await test_db.commit()
    await test_db.refresh(invoice)
    return invoice


@pytest.fixture
async def seed_user(test_db):
    user = User(
        name="User", email="user@nextmail.com",
        password=hash_password(TEST_PASSWORD, rounds=4),
    )
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user
