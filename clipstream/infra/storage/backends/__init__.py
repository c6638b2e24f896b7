"""Blob store backends."""

from .factory import create_storage_backend
from .local import LocalBackend
from .protocol import BlobStore, StoredObject
from .s3 import S3Backend

__all__ = ["BlobStore", "LocalBackend", "S3Backend", "StoredObject", "create_storage_backend"]
