"""S3-compatible backend (AWS S3, MinIO, LocalStack) using aioboto3.

Each logical bucket maps to the physical bucket
``{bucket_prefix}{bucket}``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from clipstream.infra.storage.backends.protocol import StoredObject
from clipstream.infra.storage.exceptions import (
    StorageDeleteError,
    StorageError,
    StorageNotConfiguredError,
    StorageUploadError,
    map_boto_error,
)

if TYPE_CHECKING:
    from clipstream.core.settings import StorageSettings

logger = logging.getLogger(__name__)


class S3Backend:
    """S3-compatible blob store.

    Example:
        backend = S3Backend(settings)
        await backend.startup()
        stored = await backend.upload("videos", "user-1/clip.mp4", data, "video/mp4")
        await backend.shutdown()
    """

    def __init__(self, settings: StorageSettings) -> None:
        self.settings = settings
        self._session = aioboto3.Session()
        self._client: Any = None
        self._client_context: Any = None

    @property
    def backend_name(self) -> str:
        return "s3"

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    # ========================================================================
    # Lifecycle Management
    # ========================================================================

    async def startup(self) -> None:
        """Open the S3 client."""
        if self._client is not None:
            logger.debug("S3 backend already initialized")
            return

        logger.info(
            "Initializing S3 backend",
            extra={
                "endpoint": self.settings.endpoint,
                "region": self.settings.region,
                "bucket_prefix": self.settings.bucket_prefix,
            },
        )

        boto_config = Config(
            retries={"max_attempts": self.settings.max_retries, "mode": "standard"},
            connect_timeout=self.settings.connect_timeout,
            read_timeout=self.settings.read_timeout,
        )
        try:
            self._client_context = self._session.client(
                "s3",
                **self.settings.get_boto3_config(),
                config=boto_config,
            )
            self._client = await self._client_context.__aenter__()
        except (BotoCoreError, ClientError) as e:
            logger.exception("Failed to initialize S3 backend", extra={"error": str(e)})
            self._client_context = None
            raise StorageError(
                f"Failed to initialize S3 backend: {e}",
                code="STORAGE_INITIALIZATION_ERROR",
            ) from e

        logger.info("S3 backend initialized successfully")

    async def shutdown(self) -> None:
        """Close the S3 client."""
        if self._client_context is None:
            logger.debug("S3 backend not initialized, nothing to shutdown")
            return

        logger.info("Shutting down S3 backend")
        try:
            await self._client_context.__aexit__(None, None, None)
        except (BotoCoreError, ClientError) as e:
            logger.warning("Error closing S3 client", extra={"error": str(e)})
        finally:
            self._client = None
            self._client_context = None

    def _ensure_client(self) -> Any:
        if self._client is None:
            msg = "S3 backend not initialized. Call startup() first."
            raise StorageNotConfiguredError(msg)
        return self._client

    # ========================================================================
    # Object Operations
    # ========================================================================

    def public_url(self, bucket: str, path: str) -> str:
        physical = self.settings.s3_bucket_name(bucket)
        if self.settings.public_base_url:
            return f"{self.settings.public_base_url.rstrip('/')}/{physical}/{path}"
        if self.settings.endpoint:
            return f"{self.settings.endpoint.rstrip('/')}/{physical}/{path}"
        return f"https://{physical}.s3.{self.settings.region}.amazonaws.com/{path}"

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
    ) -> StoredObject:
        client = self._ensure_client()
        physical = self.settings.s3_bucket_name(bucket)

        try:
            await client.put_object(
                Bucket=physical,
                Key=path,
                Body=data,
                ContentType=content_type,
            )
        except ClientError as e:
            logger.exception("Failed to upload object to S3", extra={"error": str(e)})
            raise map_boto_error(e, operation="upload", key=path) from e
        except BotoCoreError as e:
            logger.exception("Unexpected error during S3 upload", extra={"error": str(e)})
            raise StorageUploadError(
                f"Failed to upload {path}: {e}",
                metadata={"key": path, "bucket": physical, "error": str(e)},
            ) from e

        logger.info(
            "Object uploaded to S3",
            extra={"key": path, "bucket": physical, "size_bytes": len(data)},
        )
        return StoredObject(
            bucket=bucket,
            path=path,
            url=self.public_url(bucket, path),
            size_bytes=len(data),
            content_type=content_type,
        )

    async def read(self, bucket: str, path: str) -> bytes:
        client = self._ensure_client()
        physical = self.settings.s3_bucket_name(bucket)
        try:
            response = await client.get_object(Bucket=physical, Key=path)
            return bytes(await response["Body"].read())
        except ClientError as e:
            raise map_boto_error(e, operation="download", key=path) from e
        except BotoCoreError as e:
            raise StorageError(
                f"Failed to download {path}: {e}",
                metadata={"key": path, "bucket": physical},
            ) from e

    async def delete(self, bucket: str, path: str) -> bool:
        client = self._ensure_client()
        physical = self.settings.s3_bucket_name(bucket)

        try:
            await client.delete_object(Bucket=physical, Key=path)
        except ClientError as e:
            logger.exception("Failed to delete object from S3", extra={"error": str(e)})
            raise map_boto_error(e, operation="delete", key=path) from e
        except BotoCoreError as e:
            raise StorageDeleteError(
                f"Failed to delete {path}: {e}",
                metadata={"key": path, "bucket": physical, "error": str(e)},
            ) from e

        logger.info("Object deleted from S3", extra={"key": path, "bucket": physical})
        return True

    async def exists(self, bucket: str, path: str) -> bool:
        client = self._ensure_client()
        physical = self.settings.s3_bucket_name(bucket)
        try:
            await client.head_object(Bucket=physical, Key=path)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code in {"NoSuchKey", "404", "NotFound"}:
                return False
            raise map_boto_error(e, operation="exists", key=path) from e
        return True


__all__ = ["S3Backend"]
