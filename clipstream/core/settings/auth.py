"""Authentication settings: password hashing and bearer tokens."""

from __future__ import annotations

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Local account authentication settings.

    Environment variables use AUTH_ prefix.
    Example: AUTH_JWT_SECRET=..., AUTH_TOKEN_EXPIRE_DAYS=7
    """

    # ──────────────────────────────────────────────────────────────
    # Bearer tokens (JWT)
    # ──────────────────────────────────────────────────────────────
    jwt_secret: SecretStr = Field(
        default=SecretStr("change-me-in-production"),
        description="Secret used to sign access tokens",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        pattern=r"^HS(256|384|512)$",
        description="HMAC algorithm used to sign access tokens",
    )
    token_expire_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Access token lifetime in days",
    )
    token_issuer: str | None = Field(
        default=None,
        description="Optional 'iss' claim added to and required on tokens",
    )

    # ──────────────────────────────────────────────────────────────
    # Password hashing (passlib)
    # ──────────────────────────────────────────────────────────────
    password_schemes: list[str] = Field(
        default_factory=lambda: ["pbkdf2_sha256"],
        min_length=1,
        description="passlib schemes; the first one hashes new passwords",
    )
    password_min_length: int = Field(
        default=6,
        ge=1,
        le=128,
        description="Minimum accepted password length on registration",
    )

    environment: str = Field(
        default="development",
        validation_alias="APP_ENVIRONMENT",
        description="Mirrors APP_ENVIRONMENT for production checks",
    )

    @model_validator(mode="after")
    def validate_secret_in_production(self) -> AuthSettings:
        """Refuse the placeholder signing secret in production."""
        if (
            self.environment == "production"
            and self.jwt_secret.get_secret_value() == "change-me-in-production"
        ):
            msg = "AUTH_JWT_SECRET must be set in production"
            raise ValueError(msg)
        return self

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
        populate_by_name=True,
    )
