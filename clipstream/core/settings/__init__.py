"""Modular Pydantic Settings v2 configuration.

One frozen settings model per domain (app, database, auth, storage,
pagination, logging), each read from prefixed environment variables or
``.env`` and exposed through LRU-cached loaders:

    from clipstream.core.settings import get_app_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_logging_settings,
    get_pagination_settings,
    get_storage_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .storage import StorageSettings

__all__ = [
    "AppSettings",
    "AuthSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "PaginationSettings",
    "StorageSettings",
    "clear_settings_cache",
    "get_app_settings",
    "get_auth_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_pagination_settings",
    "get_storage_settings",
]
