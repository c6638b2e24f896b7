"""LRU-cached settings loaders.

Settings are validated once and cached for the lifetime of the process.

Usage:
    from clipstream.core.settings import get_storage_settings

    settings = get_storage_settings()

Testing:
    Clear the cache to force a reload after changing the environment:
    get_storage_settings.cache_clear()
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .storage import StorageSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings."""
    return AuthSettings()


@lru_cache(maxsize=1)
def get_storage_settings() -> StorageSettings:
    """Get cached blob storage settings."""
    return StorageSettings()


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Get cached pagination settings."""
    return PaginationSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()


def clear_settings_cache() -> None:
    """Drop every cached settings instance (tests and CLI reloads)."""
    for loader in (
        get_app_settings,
        get_db_settings,
        get_auth_settings,
        get_storage_settings,
        get_pagination_settings,
        get_logging_settings,
    ):
        loader.cache_clear()
