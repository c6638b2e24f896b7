"""Follow and unfollow business rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from clipstream.core.exceptions import BadRequestException, NotFoundException
from clipstream.core.services import BaseService
from clipstream.features.follows.models import Follow
from clipstream.features.follows.repository import get_follow_repository
from clipstream.features.users.repository import get_user_repository

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from clipstream.features.users.models import User


class FollowService(BaseService):
    """Maintains the follow graph.

    Rules:
        - nobody follows themselves
        - the target must exist
        - a pair is followed at most once
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__()
        self.session = session
        self.follows = get_follow_repository()
        self.users = get_user_repository()

    async def _require_user(self, user_id: int) -> User:
        user = await self.users.get(self.session, user_id)
        if user is None:
            raise NotFoundException("User not found", type="user-not-found")
        return user

    async def follow(self, follower: User, target_id: int) -> int:
        """Follow ``target_id`` and return its new follower count."""
        if follower.id == target_id:
            raise BadRequestException("You cannot follow yourself", type="self-follow")
        await self._require_user(target_id)

        if await self.follows.find(self.session, follower.id, target_id) is not None:
            raise BadRequestException("Already following this user", type="already-following")

        try:
            await self.follows.create(
                self.session, Follow(follower_id=follower.id, following_id=target_id)
            )
        except IntegrityError as e:
            # Lost a race with a concurrent follow of the same pair
            await self.session.rollback()
            raise BadRequestException("Already following this user", type="already-following") from e

        count = await self.follows.follower_count(self.session, target_id)
        await self.session.commit()
        self.logger.info(
            "User followed",
            extra={"follower_id": follower.id, "following_id": target_id, "follower_count": count},
        )
        return count

    async def unfollow(self, follower: User, target_id: int) -> int:
        """Unfollow ``target_id`` and return its new follower count."""
        await self._require_user(target_id)
        existing = await self.follows.find(self.session, follower.id, target_id)
        if existing is None:
            raise BadRequestException("You are not following this user", type="not-following")

        await self.follows.delete(self.session, existing)
        count = await self.follows.follower_count(self.session, target_id)
        await self.session.commit()
        self.logger.info(
            "User unfollowed",
            extra={"follower_id": follower.id, "following_id": target_id, "follower_count": count},
        )
        return count

    async def followers(self, user_id: int) -> Sequence[User]:
        await self._require_user(user_id)
        return await self.follows.list_followers(self.session, user_id)

    async def following(self, user_id: int) -> Sequence[User]:
        await self._require_user(user_id)
        return await self.follows.list_following(self.session, user_id)


__all__ = ["FollowService"]
