"""Blob storage configuration settings.

Environment variables use STORAGE_ prefix.
Example: STORAGE_BACKEND=s3
         STORAGE_ENDPOINT="http://localhost:9000"

Two backends are supported:
- ``local``: files are written below ``local_root`` and served by the API
  under ``public_base_url`` (default ``/uploads``)
- ``s3``: AWS S3 or any S3-compatible service (MinIO, LocalStack)

Logical buckets (``videos``, ``thumbnails``, ``avatars``) map to
directories for the local backend and to ``{bucket_prefix}{name}`` buckets
for S3.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, SecretStr, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

StorageBackendName = Literal["local", "s3"]


class StorageSettings(BaseSettings):
    """Blob storage settings for uploaded videos, thumbnails and avatars."""

    # ──────────────────────────────────────────────────────────────
    # Backend selection
    # ──────────────────────────────────────────────────────────────

    backend: StorageBackendName = Field(
        default="local",
        description="Storage backend: local filesystem or S3-compatible bucket",
    )
    public_base_url: str | None = Field(
        default=None,
        description=(
            "Base URL for public file links. Defaults to /uploads for the local "
            "backend and to the endpoint or AWS virtual-host URL for S3."
        ),
    )

    # ──────────────────────────────────────────────────────────────
    # Local filesystem backend
    # ──────────────────────────────────────────────────────────────

    local_root: str = Field(
        default="uploads",
        min_length=1,
        description="Directory holding local uploads (one sub-directory per bucket)",
    )
    local_mount_path: str = Field(
        default="/uploads",
        pattern=r"^/.*$",
        description="URL path where the API serves local uploads",
    )

    # ──────────────────────────────────────────────────────────────
    # S3 connection
    # ──────────────────────────────────────────────────────────────

    endpoint: str | None = Field(
        default=None,
        description="S3-compatible endpoint URL (MinIO/LocalStack). None for AWS S3.",
    )
    region: str = Field(default="us-east-1", description="S3 region")
    access_key: SecretStr | None = Field(default=None, description="S3 access key ID")
    secret_key: SecretStr | None = Field(default=None, description="S3 secret access key")
    use_ssl: bool = Field(default=True, description="Use SSL for S3 connections")
    bucket_prefix: str = Field(
        default="",
        max_length=40,
        description="Prefix prepended to logical bucket names for S3",
    )
    connect_timeout: int = Field(default=10, ge=1, le=300, description="Connect timeout (s)")
    read_timeout: int = Field(default=60, ge=1, le=3600, description="Read timeout (s)")
    max_retries: int = Field(default=3, ge=0, le=10, description="botocore retry attempts")

    # ──────────────────────────────────────────────────────────────
    # Buckets
    # ──────────────────────────────────────────────────────────────

    video_bucket: str = Field(default="videos", min_length=1)
    thumbnail_bucket: str = Field(default="thumbnails", min_length=1)
    avatar_bucket: str = Field(default="avatars", min_length=1)

    # ──────────────────────────────────────────────────────────────
    # Upload validation
    # ──────────────────────────────────────────────────────────────

    max_file_size_mb: int = Field(
        default=100,
        ge=1,
        le=5000,
        description="Maximum accepted upload size in megabytes",
    )
    video_content_types: list[str] = Field(
        default_factory=lambda: ["video/"],
        description="Accepted content-type prefixes for videos",
    )
    image_content_types: list[str] = Field(
        default_factory=lambda: ["image/"],
        description="Accepted content-type prefixes for thumbnails and avatars",
    )

    @field_validator("video_content_types", "image_content_types", mode="before")
    @classmethod
    def _parse_content_types(cls, value: Any) -> list[str]:
        """Accept comma-separated content types from env vars."""
        if isinstance(value, str):
            if value.startswith("["):
                import json

                return [str(item) for item in json.loads(value)]
            return [t.strip() for t in value.split(",") if t.strip()]
        return list(value) if value else []

    @model_validator(mode="after")
    def _validate_credential_consistency(self) -> StorageSettings:
        """Require both S3 credentials or neither (IAM role auth)."""
        if (self.access_key is None) != (self.secret_key is None):
            msg = (
                "Both access_key and secret_key must be provided together. "
                "Provide both or neither (for IAM role authentication)."
            )
            raise ValueError(msg)
        return self

    # ──────────────────────────────────────────────────────────────
    # Computed properties
    # ──────────────────────────────────────────────────────────────

    @computed_field  # type: ignore[prop-decorator]
    @property
    def max_file_size_bytes(self) -> int:
        """Max upload size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    # ──────────────────────────────────────────────────────────────
    # Helper methods
    # ──────────────────────────────────────────────────────────────

    def is_video_type(self, content_type: str | None) -> bool:
        """Whether a content type is accepted for video uploads."""
        return bool(content_type) and any(
            content_type.startswith(prefix) for prefix in self.video_content_types
        )

    def is_image_type(self, content_type: str | None) -> bool:
        """Whether a content type is accepted for image uploads."""
        return bool(content_type) and any(
            content_type.startswith(prefix) for prefix in self.image_content_types
        )

    def s3_bucket_name(self, bucket: str) -> str:
        """Physical S3 bucket name for a logical bucket."""
        return f"{self.bucket_prefix}{bucket}"

    def get_boto3_config(self) -> dict[str, Any]:
        """Keyword arguments for an aioboto3 S3 client."""
        config: dict[str, Any] = {
            "region_name": self.region,
            "use_ssl": self.use_ssl,
        }
        if self.access_key is not None and self.secret_key is not None:
            config["aws_access_key_id"] = self.access_key.get_secret_value()
            config["aws_secret_access_key"] = self.secret_key.get_secret_value()
        if self.endpoint:
            config["endpoint_url"] = self.endpoint
        return config

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
