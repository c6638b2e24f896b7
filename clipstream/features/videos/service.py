"""Video business logic.

Listings go through the shared ``CursorPaginator``. Uploads and deletes
follow a two-phase blob/record flow:

- create: store the blob(s), then write the row. If the row write fails the
  stored blobs are removed again before the error propagates.
- delete: remove the row and commit, then remove the blobs. A blob that
  cannot be removed is logged as an orphan; the request still succeeds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from clipstream.core.exceptions import ForbiddenException, NotFoundException
from clipstream.core.pagination import CollectionFilter, CursorPaginator, PageResult, PaginationInfo
from clipstream.core.services import BaseService
from clipstream.core.settings import get_pagination_settings
from clipstream.features.follows.repository import get_follow_repository
from clipstream.features.users.repository import get_user_repository
from clipstream.features.videos.models import Video, VideoLike
from clipstream.features.videos.repository import get_video_repository
from clipstream.features.videos.schemas import VideoListResponse, VideoOut
from clipstream.infra.storage import StorageError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from clipstream.core.settings import PaginationSettings
    from clipstream.features.users.models import User
    from clipstream.features.videos.schemas import VideoUpdate
    from clipstream.infra.storage import IncomingFile, StorageService, StoredObject

LikeAction = Literal["liked", "unliked"]


class VideoService(BaseService):
    """Videos: listings, detail with view counting, upload, edit, delete, likes."""

    def __init__(
        self,
        session: AsyncSession,
        storage: StorageService,
        pagination: PaginationSettings | None = None,
    ) -> None:
        super().__init__()
        self.session = session
        self.storage = storage
        self.pagination = pagination or get_pagination_settings()
        self.videos = get_video_repository()
        self.users = get_user_repository()
        self.follows = get_follow_repository()

    # ──────────────────────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────────────────────

    def paginator(self) -> CursorPaginator[Video]:
        return CursorPaginator(
            self.videos.collection_store(self.session),
            default_limit=self.pagination.default_video_limit,
            max_limit=self.pagination.max_limit,
        )

    async def require_video(self, video_id: int) -> Video:
        video = await self.videos.get(self.session, video_id)
        if video is None:
            raise NotFoundException("Video not found", type="video-not-found")
        return video

    @staticmethod
    def to_out(video: Video, is_liked: bool | None = None) -> VideoOut:
        return VideoOut.model_validate(video).model_copy(update={"is_liked": is_liked})

    def to_list_response(self, page: PageResult[Video], viewer: User | None) -> VideoListResponse:
        return VideoListResponse(
            videos=[
                self.to_out(video, page.is_related(video.id) if viewer else None)
                for video in page.items
            ],
            pagination=PaginationInfo.from_page(page),
        )

    async def _paginate(
        self,
        collection: CollectionFilter,
        cursor: str | None,
        limit: str | None,
        viewer: User | None,
    ) -> VideoListResponse:
        page = await self.paginator().paginate(
            collection,
            cursor,
            limit,
            subject_id=viewer.id if viewer else None,
            relations=self.videos.like_lookup(self.session),
        )
        return self.to_list_response(page, viewer)

    # ──────────────────────────────────────────────────────────────
    # Listings
    # ──────────────────────────────────────────────────────────────

    async def list_videos(
        self, cursor: str | None, limit: str | None, viewer: User | None = None
    ) -> VideoListResponse:
        """Global feed, newest first."""
        return await self._paginate(CollectionFilter.all(), cursor, limit, viewer)

    async def following_feed(
        self, viewer: User, cursor: str | None, limit: str | None
    ) -> VideoListResponse:
        """Videos from accounts the viewer follows; empty when following nobody."""
        followed = await self.follows.followed_ids(self.session, viewer.id)
        return await self._paginate(CollectionFilter.where("user_id", followed), cursor, limit, viewer)

    async def list_user_videos(
        self, user_id: int, cursor: str | None, limit: str | None, viewer: User | None = None
    ) -> VideoListResponse:
        if not await self.users.exists(self.session, user_id):
            raise NotFoundException("User not found", type="user-not-found")
        return await self._paginate(CollectionFilter.equals("user_id", user_id), cursor, limit, viewer)

    # ──────────────────────────────────────────────────────────────
    # Detail and views
    # ──────────────────────────────────────────────────────────────

    async def record_view(self, video_id: int) -> bool:
        """Add one view. Every call counts; there is no per-viewer deduplication."""
        found = await self.videos.increment_views(self.session, video_id)
        if found:
            await self.session.commit()
        return found

    async def get_video(self, video_id: int, viewer: User | None = None) -> VideoOut:
        """Return a video and count the view.

        Raises:
            NotFoundException: Unknown video id
        """
        if not await self.record_view(video_id):
            raise NotFoundException("Video not found", type="video-not-found")

        video = await self.videos.reload(self.session, video_id)
        if video is None:
            raise NotFoundException("Video not found", type="video-not-found")

        is_liked = None
        if viewer is not None:
            is_liked = await self.videos.find_like(self.session, viewer.id, video_id) is not None
        return self.to_out(video, is_liked)

    # ──────────────────────────────────────────────────────────────
    # Upload
    # ──────────────────────────────────────────────────────────────

    async def create_video(
        self,
        owner: User,
        video_file: IncomingFile,
        thumbnail_file: IncomingFile | None = None,
        *,
        caption: str | None = None,
        audio_name: str | None = None,
    ) -> VideoOut:
        """Store the files, then write the row.

        Raises:
            StorageValidationError: Wrong content type or empty file (400)
            StorageFileTooLargeError: File above the size limit (413)
            StorageError: Blob store unavailable (503)
        """
        owner_id = owner.id
        # Validate both files before anything is written
        self.storage.validate_video(video_file.content_type, video_file.data)
        if thumbnail_file is not None:
            self.storage.validate_image(
                thumbnail_file.content_type, thumbnail_file.data, field="thumbnail"
            )

        stored: list[StoredObject] = []
        try:
            video_blob = await self.storage.store_video(
                owner_id, video_file.filename, video_file.content_type, video_file.data
            )
            stored.append(video_blob)
            thumbnail_blob = None
            if thumbnail_file is not None:
                thumbnail_blob = await self.storage.store_thumbnail(
                    owner_id,
                    thumbnail_file.filename,
                    thumbnail_file.content_type,
                    thumbnail_file.data,
                )
                stored.append(thumbnail_blob)
        except StorageError:
            await self._compensate(stored)
            raise

        video = Video(
            user_id=owner_id,
            caption=caption,
            audio_name=audio_name,
            video_url=video_blob.url,
            thumbnail_url=thumbnail_blob.url if thumbnail_blob else None,
            video_storage_path=video_blob.path,
            thumbnail_storage_path=thumbnail_blob.path if thumbnail_blob else None,
            views=0,
        )
        try:
            video = await self.videos.create(self.session, video)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            self.logger.exception(
                "Video row write failed, removing uploaded blobs",
                extra={"user_id": owner_id, "blobs": [f"{b.bucket}/{b.path}" for b in stored]},
            )
            await self._compensate(stored)
            raise

        self.logger.info(
            "Video created",
            extra={"video_id": video.id, "user_id": owner_id, "size_bytes": video_blob.size_bytes},
        )
        return self.to_out(video, False)

    async def _compensate(self, stored: list[StoredObject]) -> None:
        for blob in stored:
            await self.storage.discard(blob.bucket, blob.path, reason="compensate-failed-create")

    # ──────────────────────────────────────────────────────────────
    # Edit and delete
    # ──────────────────────────────────────────────────────────────

    async def update_video(self, video_id: int, user: User, payload: VideoUpdate) -> VideoOut:
        video = await self.require_video(video_id)
        if video.user_id != user.id:
            raise ForbiddenException("Not authorized to update this video", type="not-video-owner")

        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(video, field, value)
        video = await self.videos.update(self.session, video)
        await self.session.commit()

        self._lazy.debug(lambda: f"video.update: Video({video_id}) fields={sorted(changes)}")
        is_liked = await self.videos.find_like(self.session, user.id, video_id) is not None
        return self.to_out(video, is_liked)

    async def delete_video(self, video_id: int, user: User) -> None:
        """Remove the row first, then its blobs."""
        video = await self.require_video(video_id)
        if video.user_id != user.id:
            raise ForbiddenException("Not authorized to delete this video", type="not-video-owner")

        blobs = [
            (self.storage.settings.video_bucket, video.video_storage_path),
            (self.storage.settings.thumbnail_bucket, video.thumbnail_storage_path),
        ]
        await self.videos.delete(self.session, video)
        await self.session.commit()

        for bucket, path in blobs:
            await self.storage.discard(bucket, path, reason="video-deleted")

        self.logger.info("Video deleted", extra={"video_id": video_id, "user_id": user.id})

    # ──────────────────────────────────────────────────────────────
    # Likes
    # ──────────────────────────────────────────────────────────────

    async def set_like(self, video_id: int, user: User, *, liked: bool) -> tuple[LikeAction, int]:
        """Like (``liked=True``) or unlike a video; repeating either is a no-op.

        Returns:
            The resulting state and the video's like count
        """
        user_id = user.id
        await self.require_video(video_id)
        existing = await self.videos.find_like(self.session, user_id, video_id)

        if liked and existing is None:
            try:
                self.session.add(VideoLike(user_id=user_id, video_id=video_id))
                await self.session.flush()
            except IntegrityError:
                # A concurrent request created the same like
                await self.session.rollback()
        elif not liked and existing is not None:
            await self.session.delete(existing)
            await self.session.flush()

        await self.session.commit()
        count = await self.videos.like_count(self.session, video_id)
        action: LikeAction = "liked" if liked else "unliked"
        self.logger.info(
            "Video like updated",
            extra={"video_id": video_id, "user_id": user_id, "action": action, "like_count": count},
        )
        return action, count


__all__ = ["VideoService"]
