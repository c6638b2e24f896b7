"""Comment business logic."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Literal

from sqlalchemy.exc import IntegrityError

from clipstream.core.exceptions import ForbiddenException, NotFoundException
from clipstream.core.pagination import (
    CollectionFilter,
    CursorPaginator,
    PageResult,
    PaginationInfo,
    coerce_limit,
    coerce_page,
)
from clipstream.core.services import BaseService
from clipstream.core.settings import get_pagination_settings
from clipstream.features.comments.models import Comment, CommentLike
from clipstream.features.comments.repository import get_comment_repository
from clipstream.features.comments.schemas import (
    CommentListResponse,
    CommentOut,
    CommentPageResponse,
)
from clipstream.features.videos.repository import get_video_repository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from clipstream.core.settings import PaginationSettings
    from clipstream.features.comments.schemas import CommentCreate, CommentUpdate
    from clipstream.features.users.models import User

LikeAction = Literal["liked", "unliked"]


class CommentService(BaseService):
    """Comments on videos."""

    def __init__(self, session: AsyncSession, pagination: PaginationSettings | None = None) -> None:
        super().__init__()
        self.session = session
        self.pagination = pagination or get_pagination_settings()
        self.comments = get_comment_repository()
        self.videos = get_video_repository()

    def paginator(self) -> CursorPaginator[Comment]:
        return CursorPaginator(
            self.comments.collection_store(self.session),
            default_limit=self.pagination.default_comment_limit,
            max_limit=self.pagination.max_limit,
        )

    async def require_comment(self, comment_id: int) -> Comment:
        comment = await self.comments.get(self.session, comment_id)
        if comment is None:
            raise NotFoundException("Comment not found", type="comment-not-found")
        return comment

    async def _require_video(self, video_id: int) -> None:
        if not await self.videos.exists(self.session, video_id):
            raise NotFoundException("Video not found", type="video-not-found")

    @staticmethod
    def to_out(comment: Comment, is_liked: bool | None = None) -> CommentOut:
        return CommentOut.model_validate(comment).model_copy(update={"is_liked": is_liked})

    def _page_response(self, page: PageResult[Comment], viewer: User | None) -> CommentListResponse:
        return CommentListResponse(
            comments=[
                self.to_out(comment, page.is_related(comment.id) if viewer else None)
                for comment in page.items
            ],
            pagination=PaginationInfo.from_page(page),
        )

    async def _is_liked(self, comment_id: int, viewer: User | None) -> bool | None:
        if viewer is None:
            return None
        return await self.comments.find_like(self.session, viewer.id, comment_id) is not None

    # ──────────────────────────────────────────────────────────────
    # Listings
    # ──────────────────────────────────────────────────────────────

    async def list_comments(
        self,
        cursor: str | None,
        limit: str | None,
        *,
        video_id: int | None = None,
        viewer: User | None = None,
    ) -> CommentListResponse:
        """All comments, or one video's, newest first."""
        collection = (
            CollectionFilter.equals("video_id", video_id)
            if video_id is not None
            else CollectionFilter.all()
        )
        page = await self.paginator().paginate(
            collection,
            cursor,
            limit,
            subject_id=viewer.id if viewer else None,
            relations=self.comments.like_lookup(self.session),
        )
        return self._page_response(page, viewer)

    async def list_video_comments(
        self,
        video_id: int,
        cursor: str | None,
        limit: str | None,
        viewer: User | None = None,
    ) -> CommentListResponse:
        """Cursor-paginated comments of one video.

        Raises:
            NotFoundException: Unknown video id
        """
        await self._require_video(video_id)
        return await self.list_comments(cursor, limit, video_id=video_id, viewer=viewer)

    async def video_comments_page(
        self,
        video_id: int,
        page: str | None,
        limit: str | None,
        viewer: User | None = None,
    ) -> CommentPageResponse:
        """Page-number listing of one video's comments."""
        await self._require_video(video_id)
        page_size = coerce_limit(
            limit, self.pagination.default_comment_limit, self.pagination.max_limit
        )
        page_number = coerce_page(page, page_size)

        store = self.comments.collection_store(self.session)
        collection = CollectionFilter.equals("video_id", video_id)
        total = await store.count_matching(collection)
        rows = await store.fetch_offset(
            collection, limit=page_size, offset=(page_number - 1) * page_size
        )

        liked: set[int] = set()
        if viewer is not None and rows:
            liked = await self.comments.like_lookup(self.session).find_relations(
                viewer.id, frozenset(row.id for row in rows)
            )
        return CommentPageResponse(
            comments=[
                self.to_out(row, (row.id in liked) if viewer else None) for row in rows
            ],
            total_pages=math.ceil(total / page_size),
            current_page=page_number,
            total_comments=total,
        )

    # ──────────────────────────────────────────────────────────────
    # CRUD
    # ──────────────────────────────────────────────────────────────

    async def get_comment(self, comment_id: int, viewer: User | None = None) -> CommentOut:
        comment = await self.require_comment(comment_id)
        return self.to_out(comment, await self._is_liked(comment_id, viewer))

    async def create_comment(self, author: User, payload: CommentCreate) -> CommentOut:
        await self._require_video(payload.video_id)
        comment = await self.comments.create(
            self.session,
            Comment(user_id=author.id, video_id=payload.video_id, content=payload.content),
        )
        await self.session.commit()
        self.logger.info(
            "Comment created",
            extra={"comment_id": comment.id, "video_id": payload.video_id, "user_id": author.id},
        )
        return self.to_out(comment, False)

    async def update_comment(
        self, comment_id: int, user: User, payload: CommentUpdate
    ) -> CommentOut:
        comment = await self.require_comment(comment_id)
        if comment.user_id != user.id:
            raise ForbiddenException(
                "Not authorized to update this comment", type="not-comment-owner"
            )
        comment.content = payload.content
        comment = await self.comments.update(self.session, comment)
        await self.session.commit()
        return self.to_out(comment, await self._is_liked(comment_id, user))

    async def delete_comment(self, comment_id: int, user: User) -> None:
        """Delete a comment; allowed for its author and the video's owner."""
        comment = await self.require_comment(comment_id)
        if comment.user_id != user.id:
            video = await self.videos.get(self.session, comment.video_id)
            if video is None or video.user_id != user.id:
                raise ForbiddenException(
                    "Not authorized to delete this comment", type="not-comment-owner"
                )

        await self.comments.delete(self.session, comment)
        await self.session.commit()
        self.logger.info("Comment deleted", extra={"comment_id": comment_id, "user_id": user.id})

    # ──────────────────────────────────────────────────────────────
    # Likes
    # ──────────────────────────────────────────────────────────────

    async def set_like(self, comment_id: int, user: User, *, liked: bool) -> tuple[LikeAction, int]:
        """Like or unlike a comment; repeating either is a no-op."""
        user_id = user.id
        await self.require_comment(comment_id)
        existing = await self.comments.find_like(self.session, user_id, comment_id)

        if liked and existing is None:
            try:
                self.session.add(CommentLike(user_id=user_id, comment_id=comment_id))
                await self.session.flush()
            except IntegrityError:
                await self.session.rollback()
        elif not liked and existing is not None:
            await self.session.delete(existing)
            await self.session.flush()

        await self.session.commit()
        count = await self.comments.like_count(self.session, comment_id)
        action: LikeAction = "liked" if liked else "unliked"
        self._lazy.debug(lambda: f"comment.like: Comment({comment_id}) {action} -> {count}")
        return action, count


__all__ = ["CommentService"]
