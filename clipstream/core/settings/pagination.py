"""Pagination settings for API responses.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_VIDEO_LIMIT=12, PAGINATION_MAX_LIMIT=50
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Defaults used when a listing request omits or garbles ``limit``.

    Attributes:
        default_video_limit: Page size for video listings and the following feed.
        default_comment_limit: Page size for comment listings.
        max_limit: Hard upper bound applied to any requested page size.
    """

    default_video_limit: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Default page size for videos and feeds",
    )
    default_comment_limit: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Default page size for comments",
    )
    max_limit: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )

    @model_validator(mode="after")
    def _defaults_within_max(self) -> PaginationSettings:
        if max(self.default_video_limit, self.default_comment_limit) > self.max_limit:
            msg = "Default page sizes must not exceed max_limit"
            raise ValueError(msg)
        return self

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
