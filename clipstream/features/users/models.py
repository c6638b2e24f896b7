"""SQLAlchemy models for user accounts."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from clipstream.core.database import TimestampedBase


class User(TimestampedBase):
    """A registered account.

    ``avatar`` holds the public URL; ``avatar_storage_path`` the object path
    inside the avatars bucket so the blob can be removed later.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(100))
    bio: Mapped[str | None] = mapped_column(Text)
    avatar: Mapped[str | None] = mapped_column(String(500))
    avatar_storage_path: Mapped[str | None] = mapped_column(String(500))

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"


__all__ = ["User"]
