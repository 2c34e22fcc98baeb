"""
Cash Card Service - Database Session Management
=================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling Strategy:
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs (tests, local runs) skip the pool arguments; SQLAlchemy
    picks the SQLite pool class itself.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from cashcard.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine for `database_url`.

    Pool sizing only applies to server databases; SQLite rejects
    pool_size/max_overflow for its single-file pools.
    """
    options: Dict[str, Any] = {
        # Echo SQL in DEBUG mode only
        "echo": settings.log_level == "DEBUG",
    }
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


# ── Engine Configuration ──────────────────────────────────────────────────
engine = build_engine(settings.database_url)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after the store commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits any pending work
        4. On error: rolls back
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/cashcards/{cash_card_id}")
        async def get_cash_card(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def init_schema() -> None:
    """
    Create all tables registered on Base.metadata if they are missing.

    Used at startup when DB_AUTO_CREATE_SCHEMA is set, and by the test suite.
    Alembic owns the schema everywhere else.
    """
    # Import models so they register with Base.metadata
    from cashcard.models import cash_card  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_schema() -> None:
    """Drop every table registered on Base.metadata."""
    from cashcard.models import cash_card  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_engine() -> None:
    """Close all pooled connections. Called during application shutdown."""
    await engine.dispose()
