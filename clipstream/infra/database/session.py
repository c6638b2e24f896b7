"""Async database engine and session management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from clipstream.core.database import Base
from clipstream.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

db_settings = get_db_settings()


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """Turn on FK enforcement for every SQLite connection.

    SQLite ignores ``ON DELETE CASCADE`` unless ``PRAGMA foreign_keys`` is set
    per connection.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, connection_record: Any) -> None:
        _ = connection_record
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(dsn: str | None = None, **overrides: Any) -> AsyncEngine:
    """Create an async engine from settings, optionally for another DSN."""
    url = dsn or db_settings.dsn
    kwargs = {**db_settings.engine_kwargs(), **overrides}
    async_engine = create_async_engine(url, **kwargs)
    if url.startswith("sqlite"):
        enable_sqlite_foreign_keys(async_engine)
    return async_engine


engine = build_engine()

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Yields:
        Database session that is automatically closed.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(User))
            users = result.scalars().all()
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables(target: AsyncEngine | None = None) -> None:
    """Create every mapped table that does not exist yet."""
    # Register all models on Base.metadata
    import clipstream.features.models  # noqa: F401

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"tables": sorted(Base.metadata.tables)})


async def init_database() -> None:
    """Verify the database connection on startup.

    Raises:
        SQLAlchemyError: If the database cannot be reached.
    """
    logger.info("Initializing database connection")
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(
            "Failed to connect to database",
            extra={"url": engine.url.render_as_string(hide_password=True), "error": str(e)},
        )
        raise

    if db_settings.is_sqlite:
        # Zero-setup local runs: SQLite databases are created on first start
        await create_tables()

    logger.info(
        "Database connection established successfully",
        extra={"url": engine.url.render_as_string(hide_password=True)},
    )


async def close_database() -> None:
    """Dispose the engine's connection pool on shutdown."""
    logger.info("Closing database connection")
    try:
        await engine.dispose()
        logger.info("Database connection closed successfully")
    except Exception as e:
        logger.exception("Error closing database connection", extra={"error": str(e)})


__all__ = [
    "AsyncSessionLocal",
    "build_engine",
    "close_database",
    "create_tables",
    "enable_sqlite_foreign_keys",
    "engine",
    "get_async_session",
    "init_database",
]
