"""Database engine and session management."""

from clipstream.infra.database.session import (
    AsyncSessionLocal,
    build_engine,
    close_database,
    create_tables,
    enable_sqlite_foreign_keys,
    engine,
    get_async_session,
    init_database,
)

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
