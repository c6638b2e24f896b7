"""Credential verification: password hashes and bearer tokens."""

from clipstream.infra.auth.passwords import get_password_context, hash_password, verify_password
from clipstream.infra.auth.tokens import create_access_token, decode_access_token

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_password_context",
    "hash_password",
    "verify_password",
]
