"""Pydantic schemas for user accounts."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import EmailStr, Field

from clipstream.core.schemas import CamelModel, CustomBase


class UserSummary(CamelModel):
    """Compact user representation embedded in videos, comments and lists."""

    id: int
    username: str
    name: str | None = None
    avatar: str | None = None


class UserListEntry(UserSummary):
    """Entry of the user directory: public profile fields plus social counts."""

    bio: str | None = None
    created_at: datetime
    follower_count: int = 0
    following_count: int = 0
    video_count: int = 0


class UserProfile(CamelModel):
    """Full profile with social counts.

    ``isFollowing`` is only present for authenticated callers.
    """

    omit_when_none: ClassVar[frozenset[str]] = frozenset({"is_following"})

    id: int
    username: str
    email: str
    name: str | None = None
    bio: str | None = None
    avatar: str | None = None
    created_at: datetime
    follower_count: int = 0
    following_count: int = 0
    video_count: int = 0
    is_following: bool | None = None


class RegisterRequest(CustomBase):
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$")
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)
    name: str | None = Field(default=None, max_length=100)


class LoginRequest(CustomBase):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class AuthResponse(CamelModel):
    """Returned by register and login."""

    user: UserProfile
    token: str


class FollowResponse(CamelModel):
    message: str
    followed: bool
    follower_count: int


class MessageResponse(CamelModel):
    message: str


__all__ = [
    "AuthResponse",
    "FollowResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "UserListEntry",
    "UserProfile",
    "UserSummary",
]
