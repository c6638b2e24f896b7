"""Backend factory selecting the blob store from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from clipstream.infra.storage.exceptions import StorageNotConfiguredError

if TYPE_CHECKING:
    from clipstream.core.settings import StorageSettings

    from .protocol import BlobStore


def create_storage_backend(settings: StorageSettings) -> BlobStore:
    """Create the backend named by ``STORAGE_BACKEND``.

    Raises:
        StorageNotConfiguredError: If the backend name is unsupported
    """
    match settings.backend:
        case "local":
            from .local import LocalBackend

            return LocalBackend.from_settings(settings)
        case "s3":
            from .s3 import S3Backend

            return S3Backend(settings)
        case _:
            msg = f"Unsupported storage backend: {settings.backend}. Supported backends: local, s3"
            raise StorageNotConfiguredError(msg)


__all__ = ["create_storage_backend"]
