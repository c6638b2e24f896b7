"""Bearer token issue and verification (PyJWT, HMAC-signed).

Tokens carry the user id in ``sub`` and expire after
``AUTH_TOKEN_EXPIRE_DAYS``.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from clipstream.core.exceptions import UnauthorizedException
from clipstream.core.settings import AuthSettings, get_auth_settings

logger = logging.getLogger(__name__)


def create_access_token(
    user_id: int,
    *,
    settings: AuthSettings | None = None,
    now: datetime | None = None,
) -> str:
    """Sign an access token for ``user_id``."""
    settings = settings or get_auth_settings()
    issued_at = now or datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.token_expire_days),
    }
    if settings.token_issuer:
        claims["iss"] = settings.token_issuer
    return jwt.encode(
        claims,
        settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str, *, settings: AuthSettings | None = None) -> int:
    """Verify a token and return the user id it was issued for.

    Raises:
        UnauthorizedException: Expired, tampered or malformed token.
    """
    settings = settings or get_auth_settings()
    try:
        claims = jwt.decode(
            token,
            key=settings.jwt_secret.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
            issuer=settings.token_issuer,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        logger.info("Rejected expired access token")
        raise UnauthorizedException("Token has expired", type="token-expired") from e
    except jwt.InvalidTokenError as e:
        logger.info("Rejected invalid access token", extra={"error": str(e)})
        raise UnauthorizedException("Invalid token", type="invalid-token") from e

    try:
        return int(claims["sub"])
    except (TypeError, ValueError) as e:
        raise UnauthorizedException("Invalid token subject", type="invalid-token") from e


__all__ = ["create_access_token", "decode_access_token"]
