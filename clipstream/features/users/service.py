"""Account business logic: registration, login, profiles and deletion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from clipstream.core.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
)
from clipstream.core.services import BaseService
from clipstream.core.settings import get_auth_settings
from clipstream.features.follows.repository import get_follow_repository
from clipstream.features.users.models import User
from clipstream.features.users.repository import get_user_repository
from clipstream.features.users.schemas import UserListEntry, UserProfile
from clipstream.infra.auth import create_access_token, hash_password, verify_password

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from clipstream.core.settings import AuthSettings
    from clipstream.features.users.schemas import LoginRequest, RegisterRequest
    from clipstream.infra.storage import IncomingFile, StorageService


class UserService(BaseService):
    """User accounts.

    Profile edits and account deletion touch blob storage and follow the
    same ordering as videos: new blobs are written before the row, old
    blobs are removed only after the row change is committed.
    """

    def __init__(
        self,
        session: AsyncSession,
        storage: StorageService | None = None,
        auth: AuthSettings | None = None,
    ) -> None:
        super().__init__()
        self.session = session
        self.storage = storage
        self.auth = auth or get_auth_settings()
        self.users = get_user_repository()
        self.follows = get_follow_repository()

    async def require_user(self, user_id: int) -> User:
        user = await self.users.get(self.session, user_id)
        if user is None:
            raise NotFoundException("User not found", type="user-not-found")
        return user

    async def profile(self, user: User, viewer: User | None = None) -> UserProfile:
        """Build a profile with follower, following and video counts."""
        counts = await self.users.profile_counts(self.session, user.id)
        is_following = None
        if viewer is not None:
            is_following = await self.follows.find(self.session, viewer.id, user.id) is not None
        return UserProfile.model_validate(user).model_copy(
            update={
                "follower_count": counts.followers,
                "following_count": counts.following,
                "video_count": counts.videos,
                "is_following": is_following,
            }
        )

    # ──────────────────────────────────────────────────────────────
    # Registration and login
    # ──────────────────────────────────────────────────────────────

    async def register(self, payload: RegisterRequest) -> tuple[User, str]:
        """Create an account and issue its first token.

        Raises:
            BadRequestException: Weak password, email or username taken
        """
        if len(payload.password) < self.auth.password_min_length:
            raise BadRequestException(
                f"Password must be at least {self.auth.password_min_length} characters",
                type="weak-password",
            )
        email = payload.email.lower()
        if await self.users.get_by_email(self.session, email) is not None:
            raise BadRequestException("Email already in use", type="email-taken")
        if await self.users.get_by_username(self.session, payload.username) is not None:
            raise BadRequestException("Username already in use", type="username-taken")

        user = User(
            username=payload.username,
            email=email,
            password_hash=hash_password(payload.password),
            name=payload.name,
        )
        try:
            user = await self.users.create(self.session, user)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise BadRequestException(
                "Email or username already in use", type="account-exists"
            ) from e

        self.logger.info("User registered", extra={"user_id": user.id, "username": user.username})
        return user, create_access_token(user.id, settings=self.auth)

    async def login(self, payload: LoginRequest) -> tuple[User, str]:
        """Check credentials and issue a token.

        Unknown email and wrong password fail the same way.
        """
        user = await self.users.get_by_email(self.session, payload.email.lower())
        if user is None or not verify_password(payload.password, user.password_hash):
            self.logger.info("Login failed", extra={"email_domain": payload.email.rsplit("@", 1)[-1]})
            raise UnauthorizedException("Invalid credentials", type="invalid-credentials")

        self._lazy.debug(lambda: f"user.login: User({user.id}) authenticated")
        return user, create_access_token(user.id, settings=self.auth)

    # ──────────────────────────────────────────────────────────────
    # Reads
    # ──────────────────────────────────────────────────────────────

    async def list_users(self) -> list[UserListEntry]:
        """Every user with bio, join date and social counts."""
        return [
            UserListEntry.model_validate(user).model_copy(
                update={
                    "follower_count": counts.followers,
                    "following_count": counts.following,
                    "video_count": counts.videos,
                }
            )
            for user, counts in await self.users.list_with_counts(self.session)
        ]

    async def get_profile(self, user_id: int, viewer: User | None = None) -> UserProfile:
        return await self.profile(await self.require_user(user_id), viewer)

    # ──────────────────────────────────────────────────────────────
    # Writes
    # ──────────────────────────────────────────────────────────────

    def _require_storage(self) -> StorageService:
        if self.storage is None:
            raise RuntimeError("UserService was built without a storage service")
        return self.storage

    async def update_profile(
        self,
        user_id: int,
        user: User,
        *,
        name: str | None = None,
        bio: str | None = None,
        avatar: IncomingFile | None = None,
    ) -> UserProfile:
        """Edit the caller's own name, bio and avatar.

        Raises:
            ForbiddenException: Editing another account
            StorageValidationError: Avatar is not an accepted image
        """
        if user.id != user_id:
            raise ForbiddenException("Not authorized to update this user", type="not-account-owner")
        storage = self._require_storage()
        target = await self.require_user(user_id)
        previous_avatar = target.avatar_storage_path

        new_blob = None
        if avatar is not None:
            new_blob = await storage.store_avatar(
                user_id, avatar.filename, avatar.content_type, avatar.data
            )
            target.avatar = new_blob.url
            target.avatar_storage_path = new_blob.path
        if name is not None:
            target.name = name
        if bio is not None:
            target.bio = bio

        try:
            target = await self.users.update(self.session, target)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            self.logger.exception("User update failed", extra={"user_id": user_id})
            if new_blob is not None:
                await storage.discard(new_blob.bucket, new_blob.path, reason="compensate-failed-update")
            raise

        if new_blob is not None and previous_avatar and previous_avatar != new_blob.path:
            await storage.discard(storage.settings.avatar_bucket, previous_avatar, reason="avatar-replaced")

        self.logger.info(
            "User updated", extra={"user_id": user_id, "avatar_changed": new_blob is not None}
        )
        return await self.profile(target, user)

    async def delete_account(self, user_id: int, user: User) -> None:
        """Delete the caller's account, then the blobs it owned.

        Videos, comments, likes and follows go with the row through the
        foreign-key cascades.
        """
        if user.id != user_id:
            raise ForbiddenException("Not authorized to delete this user", type="not-account-owner")
        storage = self._require_storage()
        target = await self.require_user(user_id)

        blobs: list[tuple[str, str | None]] = [
            (storage.settings.avatar_bucket, target.avatar_storage_path)
        ]
        for video_path, thumbnail_path in await self.users.video_blob_paths(self.session, user_id):
            blobs.append((storage.settings.video_bucket, video_path))
            blobs.append((storage.settings.thumbnail_bucket, thumbnail_path))

        await self.users.delete(self.session, target)
        await self.session.commit()

        removed = 0
        for bucket, path in blobs:
            if await storage.discard(bucket, path, reason="user-deleted"):
                removed += 1
        self.logger.info(
            "User deleted", extra={"user_id": user_id, "blobs_removed": removed, "blobs": len(blobs)}
        )


__all__ = ["UserService"]
