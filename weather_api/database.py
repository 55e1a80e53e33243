"""
Database configuration and session management.

This module contains the SQLAlchemy engine, session configuration,
and database table creation utilities.

The engine is created lazily on first use and reused for the life of the
process. Request handlers never touch it directly: they receive a session
through the ``get_db`` dependency, which tests replace via
``app.dependency_overrides``.
"""

from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from weather_api.config import settings

# Base class for all database models
Base = declarative_base()

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None


def create_engine_for_url(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Build an async engine for the given URL.

    SQLite URLs (used by tests and local development) share a single
    connection so in-memory databases survive across sessions.
    """
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    kwargs = {"echo": echo, "future": True}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        kwargs["poolclass"] = StaticPool

    return create_async_engine(database_url, **kwargs)


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first call."""
    global _engine
    if _engine is None:
        _engine = create_engine_for_url(settings.SQLALCHEMY_DATABASE_URI, echo=settings.DEBUG)
    return _engine


def get_session_factory() -> async_sessionmaker:
    """Return the session factory bound to the process-wide engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency function to get database session.

    Yields an async database session and ensures proper cleanup.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(engine: Optional[AsyncEngine] = None):
    """
    Create all database tables.

    Production deployments use Alembic; this is for tests and local SQLite.
    """
    engine = engine or get_engine()
    async with engine.begin() as conn:
        # Import all models to ensure they are registered with Base
        import weather_api.models  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: Optional[AsyncEngine] = None):
    """
    Drop all database tables.

    WARNING: This will delete all data. Use with caution.
    """
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_engine():
    """Close pooled connections held by the process-wide engine."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
