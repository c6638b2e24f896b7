"""Blob storage exceptions.

Every storage failure is an ``AppException`` so it renders as an RFC 7807
problem. Backend outages map to 503; nothing here is retried automatically.

Example:
    try:
        await client.put_object(Bucket=bucket, Key=key, Body=data)
    except ClientError as e:
        raise map_boto_error(e, operation="upload", key=key) from e
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from clipstream.core.exceptions import AppException

if TYPE_CHECKING:
    from botocore.exceptions import ClientError


class StorageError(AppException):
    """Base exception for all storage-related errors.

    Attributes:
        code: Error code identifier for programmatic error handling.
        message: Human-readable error message.
    """

    def __init__(
        self,
        message: str,
        code: str = "STORAGE_ERROR",
        status_code: int = 503,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        super().__init__(
            status_code=status_code,
            detail=message,
            type=code.lower().replace("_", "-"),
            extra=metadata or {},
        )


class StorageNotConfiguredError(StorageError):
    """Storage backend is missing required configuration."""

    def __init__(
        self,
        message: str = "Storage is not configured",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code="STORAGE_NOT_CONFIGURED", metadata=metadata)


class StorageFileNotFoundError(StorageError):
    """A requested object does not exist."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="STORAGE_NOT_FOUND", status_code=404, metadata=metadata)


class StorageUploadError(StorageError):
    """Writing an object failed."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="STORAGE_UPLOAD_ERROR", metadata=metadata)


class StorageDeleteError(StorageError):
    """Removing an object failed."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="STORAGE_DELETE_ERROR", metadata=metadata)


class StoragePermissionError(StorageError):
    """Credentials were rejected by the backend."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="STORAGE_PERMISSION_DENIED", metadata=metadata)


class StorageValidationError(StorageError):
    """An uploaded file or path failed validation (400).

    Example:
        raise StorageValidationError(
            "Invalid video file type",
            metadata={"content_type": "text/plain", "allowed": ["video/"]},
        )
    """

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message, code="STORAGE_VALIDATION_ERROR", status_code=400, metadata=metadata
        )


class StorageFileTooLargeError(StorageError):
    """An uploaded file exceeds ``STORAGE_MAX_FILE_SIZE_MB`` (413)."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="STORAGE_FILE_TOO_LARGE", status_code=413, metadata=metadata)


def map_boto_error(
    error: ClientError,
    operation: str,
    key: str | None = None,
) -> StorageError:
    """Map a botocore ClientError to a domain-specific StorageError.

    Error Code Mappings:
        - NoSuchKey, NoSuchBucket, 404 -> StorageFileNotFoundError (404)
        - AccessDenied, InvalidAccessKeyId, ... -> StoragePermissionError (503)
        - InvalidArgument, KeyTooLongError, ... -> StorageValidationError (400)
        - Others -> StorageUploadError / StorageDeleteError / StorageError (503)
    """
    error_code = error.response.get("Error", {}).get("Code", "Unknown")
    error_message = error.response.get("Error", {}).get("Message", str(error))

    metadata: dict[str, Any] = {
        "operation": operation,
        "aws_error_code": error_code,
        "aws_error_message": error_message,
    }
    if key:
        metadata["key"] = key

    message = f"{operation.capitalize()} failed: {error_message}"

    if error_code in {"NoSuchKey", "NoSuchBucket", "404", "NotFound"}:
        return StorageFileNotFoundError(message, metadata=metadata)

    if error_code in {
        "AccessDenied",
        "ExpiredToken",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "InvalidToken",
    }:
        return StoragePermissionError(message, metadata=metadata)

    if error_code in {"InvalidArgument", "InvalidRequest", "KeyTooLongError", "InvalidBucketName"}:
        return StorageValidationError(message, metadata=metadata)

    if operation == "upload":
        return StorageUploadError(message, metadata=metadata)
    if operation == "delete":
        return StorageDeleteError(message, metadata=metadata)
    return StorageError(message, metadata=metadata)


__all__ = [
    "StorageDeleteError",
    "StorageError",
    "StorageFileNotFoundError",
    "StorageFileTooLargeError",
    "StorageNotConfiguredError",
    "StoragePermissionError",
    "StorageUploadError",
    "StorageValidationError",
    "map_boto_error",
]
