"""SQLAlchemy models for videos and video likes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint, func, select
from sqlalchemy.orm import Mapped, column_property, mapped_column, relationship

from clipstream.core.database import TimestampedBase
from clipstream.features.comments.models import Comment
from clipstream.features.users.models import User


class VideoLike(TimestampedBase):
    """A user's like on a video."""

    __tablename__ = "video_likes"
    __table_args__ = (UniqueConstraint("user_id", "video_id", name="uq_video_likes_user_video"),)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    video_id: Mapped[int] = mapped_column(
        ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True
    )


class Video(TimestampedBase):
    """An uploaded short video.

    ``video_url``/``thumbnail_url`` are public URLs; the ``*_storage_path``
    columns locate the blobs inside their buckets for deletion and
    migration between backends.
    """

    __tablename__ = "videos"
    __table_args__ = (
        Index("ix_videos_created_id", "created_at", "id"),
        Index("ix_videos_user_created", "user_id", "created_at", "id"),
    )

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    caption: Mapped[str | None] = mapped_column(Text)
    video_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1000))
    audio_name: Mapped[str | None] = mapped_column(String(255))
    views: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    video_storage_path: Mapped[str | None] = mapped_column(String(500))
    thumbnail_storage_path: Mapped[str | None] = mapped_column(String(500))

    user: Mapped[User] = relationship(User, lazy="joined", innerjoin=True)

    if TYPE_CHECKING:
        like_count: int
        comment_count: int

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, user_id={self.user_id})>"


Video.like_count = column_property(  # type: ignore[misc]
    select(func.count(VideoLike.id))
    .where(VideoLike.video_id == Video.id)
    .correlate_except(VideoLike)
    .scalar_subquery()
)
Video.comment_count = column_property(  # type: ignore[misc]
    select(func.count(Comment.id))
    .where(Comment.video_id == Video.id)
    .correlate_except(Comment)
    .scalar_subquery()
)


__all__ = ["Video", "VideoLike"]
