"""
Happy Thoughts Backend — Database Session Management
=====================================================

What:  Async SQLAlchemy engine construction, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   `create_engine_from_settings()` builds an async engine with connection
       pooling; the application factory stores the engine and its session
       factory on `app.state`; `get_db_session` reads them per request and
       rolls back on error; services commit their own writes.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created once per application; sessions are created per-request.

Why the engine lives on app.state (not at module level):
    Tests build an application around their own in-memory SQLite engine,
    and nothing touches a real database just by importing this module.

Connection Pooling Strategy (non-SQLite URLs):
    pool_size / max_overflow: from settings
    pool_pre_ping:            validates connections before use
    pool_recycle=3600:        recycles connections every hour
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from happy_thoughts.config import Settings


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations and
    tests use for `create_all`.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database URL.

    SQLite (tests, local experiments) gets a StaticPool so that an in-memory
    database survives across sessions; pool sizing options don't apply to it.
    """
    if settings.is_sqlite:
        return create_async_engine(
            settings.database_url,
            poolclass=StaticPool,
            echo=settings.log_level == "DEBUG",
        )

    return create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        # Echo SQL queries in DEBUG mode for development visibility
        echo=settings.log_level == "DEBUG",
    )


# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, so
# responses can be serialized from ORM objects once the session is done
def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory stored on app.state
        2. Yields it to the route handler
        3. On error: rolls back and re-raises for the exception handlers
        4. Always: closes the session (returns connection to pool)

    No commit here: FastAPI runs this teardown after the response has been
    sent, so ThoughtService commits each write itself before returning.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables(engine: AsyncEngine) -> None:
    """
    Create every table registered on Base.metadata.

    Used by the test suite against in-memory SQLite; real deployments run
    `alembic upgrade head` instead.
    """
    # Import models so they register with Base.metadata
    from happy_thoughts.models import thought  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
