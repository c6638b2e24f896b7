"""Repository for videos and video likes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select, update

from clipstream.core.database import BaseRepository
from clipstream.core.pagination import SQLAlchemyCollectionStore, SQLAlchemyRelationLookup
from clipstream.features.videos.models import Video, VideoLike

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class VideoRepository(BaseRepository[Video]):
    """Data access for videos.

    Example:
        repo = get_video_repository()
        store = repo.collection_store(session)
        page = await CursorPaginator(store, default_limit=10).paginate(CollectionFilter.all())
    """

    def __init__(self) -> None:
        super().__init__(Video)

    def collection_store(self, session: AsyncSession) -> SQLAlchemyCollectionStore[Video]:
        return SQLAlchemyCollectionStore(session, Video)

    def like_lookup(self, session: AsyncSession) -> SQLAlchemyRelationLookup:
        return SQLAlchemyRelationLookup(session, VideoLike.user_id, VideoLike.video_id)

    async def reload(self, session: AsyncSession, video_id: int) -> Video | None:
        """Fetch a fresh copy, overwriting any state already in the identity map."""
        stmt = select(Video).where(Video.id == video_id).execution_options(populate_existing=True)
        return (await session.execute(stmt)).unique().scalar_one_or_none()

    async def increment_views(self, session: AsyncSession, video_id: int) -> bool:
        """Atomically add one view; False when the video does not exist."""
        stmt = (
            update(Video)
            .where(Video.id == video_id)
            .values(views=Video.views + 1)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        found = bool(result.rowcount)
        self._lazy.debug(lambda: f"db.increment_views: Video({video_id}) -> {found}")
        return found

    async def find_like(self, session: AsyncSession, user_id: int, video_id: int) -> VideoLike | None:
        stmt = select(VideoLike).where(VideoLike.user_id == user_id, VideoLike.video_id == video_id)
        return (await session.execute(stmt)).scalar_one_or_none()

    async def like_count(self, session: AsyncSession, video_id: int) -> int:
        stmt = select(func.count(VideoLike.id)).where(VideoLike.video_id == video_id)
        return (await session.execute(stmt)).scalar_one()

    async def with_local_urls(self, session: AsyncSession, url_prefix: str) -> Sequence[Video]:
        """Videos whose file is still served by the local backend."""
        stmt = select(Video).where(Video.video_url.startswith(url_prefix)).order_by(Video.id)
        return (await session.execute(stmt)).unique().scalars().all()

    async def all_ordered(self, session: AsyncSession) -> Sequence[Video]:
        stmt = select(Video).order_by(Video.id)
        return (await session.execute(stmt)).unique().scalars().all()


_video_repository: VideoRepository | None = None


def get_video_repository() -> VideoRepository:
    global _video_repository
    if _video_repository is None:
        _video_repository = VideoRepository()
    return _video_repository


__all__ = ["VideoRepository", "get_video_repository"]
