"""Blob store protocol and result types.

A blob store addresses objects by a logical bucket (``videos``,
``thumbnails``, ``avatars``) and a relative path inside it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class StoredObject:
    """Result of an upload.

    Attributes:
        bucket: Logical bucket name
        path: Object path inside the bucket
        url: Public URL clients use to fetch the object
        size_bytes: Number of bytes written
        content_type: MIME type recorded with the object
    """

    bucket: str
    path: str
    url: str
    size_bytes: int
    content_type: str


@runtime_checkable
class BlobStore(Protocol):
    """Interface every storage backend implements."""

    @property
    def backend_name(self) -> str:
        """Backend identifier ("local", "s3")."""
        ...

    async def startup(self) -> None:
        """Acquire clients or create directories."""
        ...

    async def shutdown(self) -> None:
        """Release clients."""
        ...

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
    ) -> StoredObject:
        """Write ``data`` and return where it can be fetched from."""
        ...

    async def read(self, bucket: str, path: str) -> bytes:
        """Read an object's bytes."""
        ...

    async def delete(self, bucket: str, path: str) -> bool:
        """Remove an object; False when it did not exist."""
        ...

    async def exists(self, bucket: str, path: str) -> bool:
        ...

    def public_url(self, bucket: str, path: str) -> str:
        ...


__all__ = ["BlobStore", "StoredObject"]
