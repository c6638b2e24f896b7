"""Pydantic schemas for videos."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Literal

from pydantic import Field

from clipstream.core.pagination import PaginationInfo
from clipstream.core.schemas import CamelModel
from clipstream.features.users.schemas import UserSummary


class VideoOut(CamelModel):
    """Video as returned by the API.

    ``isLiked`` is only present for authenticated callers.
    """

    omit_when_none: ClassVar[frozenset[str]] = frozenset({"is_liked"})

    id: int
    user_id: int
    caption: str | None = None
    video_url: str
    thumbnail_url: str | None = None
    audio_name: str | None = None
    views: int = 0
    created_at: datetime
    updated_at: datetime
    user: UserSummary
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool | None = None


class VideoListResponse(CamelModel):
    """``{"videos": [...], "pagination": {"nextCursor": ..., "hasNextPage": ...}}``."""

    videos: list[VideoOut]
    pagination: PaginationInfo


class VideoUpdate(CamelModel):
    caption: str | None = Field(default=None, max_length=2200)
    audio_name: str | None = Field(default=None, max_length=255)


class LikeResponse(CamelModel):
    message: str
    action: Literal["liked", "unliked"]
    like_count: int


__all__ = ["LikeResponse", "VideoListResponse", "VideoOut", "VideoUpdate"]
