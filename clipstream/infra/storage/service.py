"""High-level storage service.

Wraps a blob store backend with the application's bucket layout, upload
validation and best-effort deletes. A single instance is shared
application-wide and started/stopped by the lifespan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clipstream.core.settings import get_storage_settings
from clipstream.infra.storage.backends.factory import create_storage_backend
from clipstream.infra.storage.exceptions import (
    StorageError,
    StorageFileTooLargeError,
    StorageValidationError,
)
from clipstream.infra.storage.naming import generate_unique_file_name, user_object_path

if TYPE_CHECKING:
    from clipstream.core.settings import StorageSettings
    from clipstream.infra.storage.backends.protocol import BlobStore, StoredObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IncomingFile:
    """An uploaded file read into memory by the HTTP layer."""

    filename: str | None
    content_type: str | None
    data: bytes


class StorageService:
    """Application-facing storage operations.

    Example:
        service = get_storage_service()
        await service.startup()
        stored = await service.store_video(user.id, "clip.mp4", "video/mp4", data)
        await service.discard(stored.bucket, stored.path)
    """

    def __init__(
        self,
        settings: StorageSettings | None = None,
        backend: BlobStore | None = None,
    ) -> None:
        self._settings = settings or get_storage_settings()
        self._backend = backend or create_storage_backend(self._settings)
        self._started = False

    @property
    def settings(self) -> StorageSettings:
        return self._settings

    @property
    def backend(self) -> BlobStore:
        return self._backend

    async def startup(self) -> None:
        if self._started:
            return
        logger.info("Starting storage service", extra={"backend": self._backend.backend_name})
        await self._backend.startup()
        self._started = True

    async def shutdown(self) -> None:
        if not self._started:
            logger.debug("Storage service not started, nothing to shutdown")
            return
        await self._backend.shutdown()
        self._started = False
        logger.info("Storage service stopped")

    # ──────────────────────────────────────────────────────────────
    # Validation
    # ──────────────────────────────────────────────────────────────

    def _check_size(self, data: bytes, field: str) -> None:
        if len(data) > self._settings.max_file_size_bytes:
            raise StorageFileTooLargeError(
                f"{field} exceeds the {self._settings.max_file_size_mb} MB limit",
                metadata={"field": field, "size_bytes": len(data)},
            )
        if not data:
            raise StorageValidationError(f"{field} is empty", metadata={"field": field})

    def validate_video(self, content_type: str | None, data: bytes) -> None:
        if not self._settings.is_video_type(content_type):
            raise StorageValidationError(
                "Invalid video file type",
                metadata={"content_type": content_type, "allowed": self._settings.video_content_types},
            )
        self._check_size(data, "video")

    def validate_image(self, content_type: str | None, data: bytes, field: str = "image") -> None:
        if not self._settings.is_image_type(content_type):
            raise StorageValidationError(
                f"Invalid {field} file type",
                metadata={"content_type": content_type, "allowed": self._settings.image_content_types},
            )
        self._check_size(data, field)

    # ──────────────────────────────────────────────────────────────
    # Uploads
    # ──────────────────────────────────────────────────────────────

    async def _store(
        self,
        bucket: str,
        user_id: int,
        filename: str | None,
        content_type: str,
        data: bytes,
    ) -> StoredObject:
        path = user_object_path(user_id, generate_unique_file_name(filename))
        return await self._backend.upload(bucket, path, data, content_type)

    async def store_video(
        self, user_id: int, filename: str | None, content_type: str | None, data: bytes
    ) -> StoredObject:
        self.validate_video(content_type, data)
        return await self._store(
            self._settings.video_bucket, user_id, filename, content_type or "", data
        )

    async def store_thumbnail(
        self, user_id: int, filename: str | None, content_type: str | None, data: bytes
    ) -> StoredObject:
        self.validate_image(content_type, data, field="thumbnail")
        return await self._store(
            self._settings.thumbnail_bucket, user_id, filename, content_type or "", data
        )

    async def store_avatar(
        self, user_id: int, filename: str | None, content_type: str | None, data: bytes
    ) -> StoredObject:
        self.validate_image(content_type, data, field="avatar")
        return await self._store(
            self._settings.avatar_bucket, user_id, filename, content_type or "", data
        )

    # ──────────────────────────────────────────────────────────────
    # Deletes
    # ──────────────────────────────────────────────────────────────

    async def discard(self, bucket: str, path: str | None, *, reason: str = "cleanup") -> bool:
        """Best-effort delete used after the owning row is already gone.

        A failure leaves an orphaned object behind; it is logged with its
        bucket and path and never raised.
        """
        if not path:
            return False
        try:
            return await self._backend.delete(bucket, path)
        except StorageError as e:
            logger.warning(
                "Orphaned blob left in storage",
                extra={"bucket": bucket, "path": path, "reason": reason, "error": e.detail},
            )
            return False


_storage_service: StorageService | None = None


def get_storage_service() -> StorageService:
    """Get the application-wide StorageService."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service


def reset_storage_service() -> None:
    """Forget the shared instance (tests, settings reloads)."""
    global _storage_service
    _storage_service = None


__all__ = ["IncomingFile", "StorageService", "get_storage_service", "reset_storage_service"]
