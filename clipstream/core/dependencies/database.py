"""Database dependencies for FastAPI route handlers.

Two session getters share one session factory:

1. ``get_db_session()`` (this module): FastAPI dependency whose session
   lifetime is tied to the HTTP request.
2. ``get_async_session()`` (``clipstream.infra.database``): async context
   manager for CLI commands and scripts.

Example:
    @router.get("/videos")
    async def list_videos(session: Annotated[AsyncSession, Depends(get_db_session)]):
        ...
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clipstream.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for a request-scoped database session."""
    async with get_async_session() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_db_session)]

__all__ = ["SessionDep", "get_db_session"]
