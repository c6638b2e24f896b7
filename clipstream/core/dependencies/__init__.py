"""FastAPI dependencies shared by the feature routers."""

from clipstream.core.dependencies.auth import (
    CurrentUser,
    OptionalUser,
    get_current_user,
    get_optional_user,
)
from clipstream.core.dependencies.database import SessionDep, get_db_session
from clipstream.core.dependencies.pagination import CursorParams, CursorParamsDep
from clipstream.core.dependencies.storage import StorageDep, get_storage

__all__ = [
    "CurrentUser",
    "CursorParams",
    "CursorParamsDep",
    "OptionalUser",
    "SessionDep",
    "StorageDep",
    "get_current_user",
    "get_db_session",
    "get_optional_user",
    "get_storage",
]
