"""Pydantic schemas for comments."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from clipstream.core.pagination import PaginationInfo
from clipstream.core.schemas import CamelModel
from clipstream.features.users.schemas import UserSummary


class CommentOut(CamelModel):
    """Comment as returned by the API; ``isLiked`` only for authenticated callers."""

    omit_when_none: ClassVar[frozenset[str]] = frozenset({"is_liked"})

    id: int
    content: str
    user_id: int
    video_id: int
    created_at: datetime
    updated_at: datetime
    user: UserSummary
    like_count: int = 0
    is_liked: bool | None = None


class CommentListResponse(CamelModel):
    comments: list[CommentOut]
    pagination: PaginationInfo


class CommentPageResponse(CamelModel):
    """Page-number listing kept for older clients."""

    comments: list[CommentOut]
    total_pages: int
    current_page: int
    total_comments: int


class CommentCreate(CamelModel):
    video_id: int = Field(gt=0)
    content: str = Field(min_length=1, max_length=2000)


class CommentUpdate(CamelModel):
    content: str = Field(min_length=1, max_length=2000)


__all__ = [
    "CommentCreate",
    "CommentListResponse",
    "CommentOut",
    "CommentPageResponse",
    "CommentUpdate",
]
