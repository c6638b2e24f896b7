"""SQLAlchemy models for comments and comment likes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Text, UniqueConstraint, func, select
from sqlalchemy.orm import Mapped, column_property, mapped_column, relationship

from clipstream.core.database import TimestampedBase
from clipstream.features.users.models import User


class CommentLike(TimestampedBase):
    """A user's like on a comment."""

    __tablename__ = "comment_likes"
    __table_args__ = (
        UniqueConstraint("user_id", "comment_id", name="uq_comment_likes_user_comment"),
    )

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    comment_id: Mapped[int] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=False, index=True
    )


class Comment(TimestampedBase):
    """A comment on a video."""

    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_video_created", "video_id", "created_at", "id"),)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    video_id: Mapped[int] = mapped_column(
        ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    user: Mapped[User] = relationship(User, lazy="joined", innerjoin=True)

    if TYPE_CHECKING:
        like_count: int

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, video_id={self.video_id})>"


# Loaded with the row, so a page of comments costs a single SELECT
Comment.like_count = column_property(  # type: ignore[misc]
    select(func.count(CommentLike.id))
    .where(CommentLike.comment_id == Comment.id)
    .correlate_except(CommentLike)
    .scalar_subquery()
)


__all__ = ["Comment", "CommentLike"]
