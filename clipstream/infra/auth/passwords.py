"""Password hashing with passlib."""

from __future__ import annotations

from functools import lru_cache

from passlib.context import CryptContext

from clipstream.core.settings import get_auth_settings


@lru_cache(maxsize=1)
def get_password_context() -> CryptContext:
    """CryptContext built from ``AUTH_PASSWORD_SCHEMES``; the first scheme hashes."""
    settings = get_auth_settings()
    return CryptContext(schemes=list(settings.password_schemes), deprecated="auto")


def hash_password(password: str) -> str:
    return get_password_context().hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a plain password against a stored hash.

    Unknown or malformed hashes count as a mismatch rather than an error.
    """
    if not password_hash:
        return False
    try:
        return get_password_context().verify(password, password_hash)
    except ValueError:
        return False


__all__ = ["get_password_context", "hash_password", "verify_password"]
