"""Authentication dependencies.

Bearer tokens are read from the ``Authorization`` header.

Example:
    @router.post("/videos/{video_id}/like")
    async def like(video_id: int, user: CurrentUser): ...

    @router.get("/videos")
    async def list_videos(user: OptionalUser):
        # None for anonymous callers
        ...
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from clipstream.core.dependencies.database import get_db_session
from clipstream.core.exceptions import UnauthorizedException
from clipstream.features.users.models import User
from clipstream.infra.auth import decode_access_token
from clipstream.infra.logging import set_log_context

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Access token from /users/login")


async def _resolve_user(session: AsyncSession, token: str) -> User:
    user_id = decode_access_token(token)
    user = await session.get(User, user_id)
    if user is None:
        logger.info("Token subject no longer exists", extra={"user_id": user_id})
        raise UnauthorizedException("User not found", type="invalid-token")
    set_log_context(user_id=user.id)
    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User:
    """Require a valid bearer token.

    Raises:
        UnauthorizedException: Missing, invalid or expired token
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Authentication required", type="missing-token")
    return await _resolve_user(session, credentials.credentials)


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User | None:
    """Resolve the caller when a valid token is present, else None.

    Invalid tokens degrade to anonymous access instead of failing.
    """
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await _resolve_user(session, credentials.credentials)
    except UnauthorizedException:
        return None


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]

__all__ = ["CurrentUser", "OptionalUser", "bearer_scheme", "get_current_user", "get_optional_user"]
