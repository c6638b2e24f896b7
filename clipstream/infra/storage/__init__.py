"""Blob storage for uploaded videos, thumbnails and avatars."""

from clipstream.infra.storage.backends import (
    BlobStore,
    LocalBackend,
    S3Backend,
    StoredObject,
    create_storage_backend,
)
from clipstream.infra.storage.exceptions import (
    StorageDeleteError,
    StorageError,
    StorageFileNotFoundError,
    StorageFileTooLargeError,
    StorageNotConfiguredError,
    StoragePermissionError,
    StorageUploadError,
    StorageValidationError,
    map_boto_error,
)
from clipstream.infra.storage.naming import (
    generate_unique_file_name,
    guess_mime_type,
    user_object_path,
)
from clipstream.infra.storage.service import (
    IncomingFile,
    StorageService,
    get_storage_service,
    reset_storage_service,
)

__all__ = [
    "BlobStore",
    "IncomingFile",
    "LocalBackend",
    "S3Backend",
    "StorageDeleteError",
    "StorageError",
    "StorageFileNotFoundError",
    "StorageFileTooLargeError",
    "StorageNotConfiguredError",
    "StoragePermissionError",
    "StorageService",
    "StorageUploadError",
    "StorageValidationError",
    "StoredObject",
    "create_storage_backend",
    "generate_unique_file_name",
    "get_storage_service",
    "guess_mime_type",
    "map_boto_error",
    "reset_storage_service",
    "user_object_path",
]
