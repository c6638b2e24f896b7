"""Repository for the follow graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from clipstream.core.database import BaseRepository
from clipstream.core.pagination import SQLAlchemyRelationLookup
from clipstream.features.follows.models import Follow
from clipstream.features.users.models import User

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class FollowRepository(BaseRepository[Follow]):
    """Data access for follows."""

    def __init__(self) -> None:
        super().__init__(Follow)

    async def find(self, session: AsyncSession, follower_id: int, following_id: int) -> Follow | None:
        stmt = select(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    async def follower_count(self, session: AsyncSession, user_id: int) -> int:
        stmt = select(func.count(Follow.id)).where(Follow.following_id == user_id)
        return (await session.execute(stmt)).scalar_one()

    async def followed_ids(self, session: AsyncSession, follower_id: int) -> set[int]:
        """Ids of every user ``follower_id`` follows (the feed filter)."""
        stmt = select(Follow.following_id).where(Follow.follower_id == follower_id)
        ids = set((await session.execute(stmt)).scalars().all())
        self._lazy.debug(lambda: f"db.followed_ids: User({follower_id}) -> {len(ids)} users")
        return ids

    async def list_followers(self, session: AsyncSession, user_id: int) -> Sequence[User]:
        stmt = (
            select(User)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.following_id == user_id)
            .order_by(Follow.id.desc())
        )
        return (await session.execute(stmt)).scalars().all()

    async def list_following(self, session: AsyncSession, user_id: int) -> Sequence[User]:
        stmt = (
            select(User)
            .join(Follow, Follow.following_id == User.id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.id.desc())
        )
        return (await session.execute(stmt)).scalars().all()

    def relation_lookup(self, session: AsyncSession) -> SQLAlchemyRelationLookup:
        """Batched check of which users the subject follows."""
        return SQLAlchemyRelationLookup(session, Follow.follower_id, Follow.following_id)


_follow_repository: FollowRepository | None = None


def get_follow_repository() -> FollowRepository:
    global _follow_repository
    if _follow_repository is None:
        _follow_repository = FollowRepository()
    return _follow_repository


__all__ = ["FollowRepository", "get_follow_repository"]
