"""Repository for user accounts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from clipstream.core.database import BaseRepository
from clipstream.features.follows.models import Follow
from clipstream.features.users.models import User
from clipstream.features.videos.models import Video

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True, slots=True)
class ProfileCounts:
    followers: int
    following: int
    videos: int


class UserRepository(BaseRepository[User]):
    """Data access for users.

    Example:
        repo = get_user_repository()
        user = await repo.get_by_email(session, "ada@example.com")
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(self, session: AsyncSession, email: str) -> User | None:
        return await self.get_by(session, User.email, email.lower())

    async def get_by_username(self, session: AsyncSession, username: str) -> User | None:
        return await self.get_by(session, User.username, username)

    async def list_with_counts(self, session: AsyncSession) -> list[tuple[User, ProfileCounts]]:
        """Every user, oldest first, with profile counts in a single query."""
        followers = (
            select(func.count(Follow.id))
            .where(Follow.following_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        following = (
            select(func.count(Follow.id))
            .where(Follow.follower_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        videos = (
            select(func.count(Video.id)).where(Video.user_id == User.id).correlate(User).scalar_subquery()
        )

        stmt = select(User, followers, following, videos).order_by(User.id)
        rows = (await session.execute(stmt)).all()
        self._lazy.debug(lambda: f"db.list_with_counts: {len(rows)} users")
        return [
            (user, ProfileCounts(followers=n_followers, following=n_following, videos=n_videos))
            for user, n_followers, n_following, n_videos in rows
        ]

    async def profile_counts(self, session: AsyncSession, user_id: int) -> ProfileCounts:
        """Follower, following and video counts in one round-trip."""
        followers = (
            select(func.count(Follow.id)).where(Follow.following_id == user_id).scalar_subquery()
        )
        following = (
            select(func.count(Follow.id)).where(Follow.follower_id == user_id).scalar_subquery()
        )
        videos = select(func.count(Video.id)).where(Video.user_id == user_id).scalar_subquery()

        row = (await session.execute(select(followers, following, videos))).one()
        counts = ProfileCounts(followers=row[0], following=row[1], videos=row[2])
        self._lazy.debug(lambda: f"db.profile_counts: User({user_id}) -> {counts}")
        return counts

    async def video_blob_paths(
        self, session: AsyncSession, user_id: int
    ) -> Sequence[tuple[str | None, str | None]]:
        """``(video_storage_path, thumbnail_storage_path)`` for every video the user owns."""
        stmt = select(Video.video_storage_path, Video.thumbnail_storage_path).where(
            Video.user_id == user_id
        )
        return [tuple(row) for row in (await session.execute(stmt)).all()]


_user_repository: UserRepository | None = None


def get_user_repository() -> UserRepository:
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository


__all__ = ["ProfileCounts", "UserRepository", "get_user_repository"]
