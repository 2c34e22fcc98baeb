"""
Cash Card Service - Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Points the application at a throwaway SQLite database (aiosqlite)
       before any `cashcard` module is imported.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_store: AsyncMock standing in for CashCardStore
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    ├── database: Creates the schema, drops it and disposes the pool afterwards
    ├── db_session: AsyncSession bound to the test database
    ├── seeded_cash_cards: Cards 99 / 100 / 101 with amounts 123.45 / 1.00 / 150.00
    └── test_client: HTTPX AsyncClient talking to the FastAPI app in-process
"""

import os
import tempfile
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before cashcard.config builds its settings singleton
_test_db_dir = tempfile.mkdtemp(prefix="cashcard_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_db_dir}/test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from cashcard.repositories.cash_card_store import CashCardStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_store():
    """
    Provides a mock CashCardStore.

    Usage:
        async def test_get(mock_store):
            mock_store.get.return_value = CashCardRecord(id=99, amount=Decimal("1.00"))
            service = CashCardService(mock_store)
    """
    return AsyncMock(spec=CashCardStore)


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_failure(mock_db_session):
            mock_db_session.execute.side_effect = OperationalError(...)
            store = SqlAlchemyCashCardStore(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_amounts():
    """Amounts used by the seeded cards, keyed by id."""
    return {
        99: Decimal("123.45"),
        100: Decimal("1.00"),
        101: Decimal("150.00"),
    }


@pytest_asyncio.fixture
async def database():
    """
    Fresh schema for each test.

    The engine pool is disposed afterwards so no connection outlives the
    test's event loop.
    """
    from cashcard.database import dispose_engine, drop_schema, init_schema

    await drop_schema()
    await init_schema()
    yield
    await drop_schema()
    await dispose_engine()


@pytest_asyncio.fixture
async def db_session(database):
    """AsyncSession on the test database, closed after the test."""
    from cashcard.database import async_session_factory

    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_cash_cards(database, sample_amounts):
    """Inserts cards 99, 100 and 101 with fixed ids."""
    from cashcard.database import async_session_factory
    from cashcard.models.cash_card import CashCard

    async with async_session_factory() as session:
        session.add_all(
            [CashCard(id=card_id, amount=amount) for card_id, amount in sample_amounts.items()]
        )
        await session.commit()
    return sample_amounts


@pytest_asyncio.fixture
async def test_client():
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from cashcard.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
