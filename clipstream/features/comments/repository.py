"""Repository for comments and comment likes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from clipstream.core.database import BaseRepository
from clipstream.core.pagination import SQLAlchemyCollectionStore, SQLAlchemyRelationLookup
from clipstream.features.comments.models import Comment, CommentLike

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class CommentRepository(BaseRepository[Comment]):
    """Data access for comments."""

    def __init__(self) -> None:
        super().__init__(Comment)

    def collection_store(self, session: AsyncSession) -> SQLAlchemyCollectionStore[Comment]:
        return SQLAlchemyCollectionStore(session, Comment)

    def like_lookup(self, session: AsyncSession) -> SQLAlchemyRelationLookup:
        return SQLAlchemyRelationLookup(session, CommentLike.user_id, CommentLike.comment_id)

    async def find_like(
        self, session: AsyncSession, user_id: int, comment_id: int
    ) -> CommentLike | None:
        stmt = select(CommentLike).where(
            CommentLike.user_id == user_id, CommentLike.comment_id == comment_id
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    async def like_count(self, session: AsyncSession, comment_id: int) -> int:
        stmt = select(func.count(CommentLike.id)).where(CommentLike.comment_id == comment_id)
        return (await session.execute(stmt)).scalar_one()


_comment_repository: CommentRepository | None = None


def get_comment_repository() -> CommentRepository:
    global _comment_repository
    if _comment_repository is None:
        _comment_repository = CommentRepository()
    return _comment_repository


__all__ = ["CommentRepository", "get_comment_repository"]
