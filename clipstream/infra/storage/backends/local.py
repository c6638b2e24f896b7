"""Local filesystem backend.

Objects live at ``{local_root}/{bucket}/{path}`` and are served by the API's
static mount, so their URL is ``{public_base_url}/{bucket}/{path}``.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from clipstream.infra.storage.backends.protocol import StoredObject
from clipstream.infra.storage.exceptions import (
    StorageDeleteError,
    StorageFileNotFoundError,
    StorageUploadError,
    StorageValidationError,
)
from clipstream.infra.storage.naming import validate_object_path

if TYPE_CHECKING:
    from clipstream.core.settings import StorageSettings

logger = logging.getLogger(__name__)


class LocalBackend:
    """Filesystem-backed blob store.

    Example:
        backend = LocalBackend(root=Path("uploads"), base_url="/uploads")
        stored = await backend.upload("videos", "user-1/clip.mp4", data, "video/mp4")
        stored.url  # "/uploads/videos/user-1/clip.mp4"
    """

    def __init__(self, root: Path | str, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> LocalBackend:
        return cls(
            root=settings.local_root,
            base_url=settings.public_base_url or settings.local_mount_path,
        )

    @property
    def backend_name(self) -> str:
        return "local"

    def _file_path(self, bucket: str, path: str) -> Path:
        try:
            validate_object_path(bucket)
            validate_object_path(path)
        except ValueError as e:
            raise StorageValidationError(str(e), metadata={"bucket": bucket, "path": path}) from e
        return self.root / bucket / path

    async def startup(self) -> None:
        await asyncio.to_thread(self.root.mkdir, parents=True, exist_ok=True)
        logger.info("Local storage ready", extra={"root": str(self.root.resolve())})

    async def shutdown(self) -> None:
        return None

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/{bucket}/{path}"

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
    ) -> StoredObject:
        target = self._file_path(bucket, path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            logger.exception("Failed to write local object", extra={"bucket": bucket, "path": path})
            raise StorageUploadError(
                f"Failed to store {bucket}/{path}",
                metadata={"bucket": bucket, "path": path, "error": str(e)},
            ) from e

        logger.info(
            "Object stored locally",
            extra={"bucket": bucket, "path": path, "size_bytes": len(data)},
        )
        return StoredObject(
            bucket=bucket,
            path=path,
            url=self.public_url(bucket, path),
            size_bytes=len(data),
            content_type=content_type,
        )

    async def read(self, bucket: str, path: str) -> bytes:
        target = self._file_path(bucket, path)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except FileNotFoundError as e:
            raise StorageFileNotFoundError(
                f"Object not found: {bucket}/{path}",
                metadata={"bucket": bucket, "path": path},
            ) from e

    async def delete(self, bucket: str, path: str) -> bool:
        target = self._file_path(bucket, path)
        try:
            await asyncio.to_thread(target.unlink)
        except FileNotFoundError:
            logger.debug("Local object already absent", extra={"bucket": bucket, "path": path})
            return False
        except OSError as e:
            raise StorageDeleteError(
                f"Failed to delete {bucket}/{path}",
                metadata={"bucket": bucket, "path": path, "error": str(e)},
            ) from e

        logger.info("Local object deleted", extra={"bucket": bucket, "path": path})
        return True

    async def exists(self, bucket: str, path: str) -> bool:
        target = self._file_path(bucket, path)
        return await asyncio.to_thread(target.is_file)


__all__ = ["LocalBackend"]
