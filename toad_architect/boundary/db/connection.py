"""
Database connection management.

One async engine and session factory per process, built lazily from
DatabaseSettings. PostgreSQL (asyncpg) gets a sized, pre-pinged pool;
SQLite URLs (local runs, tests) use SQLAlchemy's default pool.

Dependencies: sqlalchemy, toad_architect.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from toad_architect.boundary.db.base import Base
from toad_architect.configs import get_settings
from toad_architect.configs.database import DatabaseSettings


def _engine_options(db_config: DatabaseSettings) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": db_config.echo_sql}
    if not db_config.is_sqlite:
        options.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_pre_ping=True,
        )
    return options


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Process-wide async engine for the session store.

    Raises:
        ArgumentError: If the configured database URL is invalid
    """
    db_config = get_settings().database
    return create_async_engine(db_config.async_database_url, **_engine_options(db_config))


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to the process-wide engine.

    Rows stay readable after commit (expire_on_commit=False) because the
    service converts them to pydantic models after committing.
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one AsyncSession per request."""
    async with get_async_session_factory()() as session:
        yield session


async def init_models(engine: AsyncEngine | None = None) -> None:
    """
    Create the sessions table and its index if missing.

    Args:
        engine: Engine to use (defaults to the process-wide engine)
    """
    # Register models with the metadata
    from toad_architect.boundary.db.models import SessionModel  # noqa: F401

    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine and factory."""
    if get_async_engine.cache_info().currsize == 0:
        return
    await get_async_engine().dispose()
    get_async_session_factory.cache_clear()
    get_async_engine.cache_clear()
