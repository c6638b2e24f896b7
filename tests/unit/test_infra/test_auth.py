"""Unit tests for password hashing and access tokens."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from clipstream.core.exceptions import UnauthorizedException
from clipstream.core.settings import AuthSettings
from clipstream.infra.auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

SETTINGS = AuthSettings(jwt_secret="unit-test-secret-with-enough-bytes-000", token_expire_days=7)


class TestPasswords:
    def test_hash_and_verify(self):
        password_hash = hash_password("secret123")

        assert password_hash != "secret123"
        assert verify_password("secret123", password_hash) is True
        assert verify_password("wrong", password_hash) is False

    def test_hashes_are_salted(self):
        assert hash_password("secret123") != hash_password("secret123")

    @pytest.mark.parametrize("stored", [None, "", "not-a-hash"])
    def test_unusable_hash_is_a_mismatch(self, stored):
        assert verify_password("secret123", stored) is False


class TestAccessTokens:
    def test_round_trip(self):
        token = create_access_token(42, settings=SETTINGS)

        assert decode_access_token(token, settings=SETTINGS) == 42

    def test_subject_is_a_string_claim(self):
        token = create_access_token(42, settings=SETTINGS)

        claims = jwt.decode(token, options={"verify_signature": False})

        assert claims["sub"] == "42"
        assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())

    def test_expired_token(self):
        issued = datetime.now(UTC) - timedelta(days=8)
        token = create_access_token(1, settings=SETTINGS, now=issued)

        with pytest.raises(UnauthorizedException) as exc_info:
            decode_access_token(token, settings=SETTINGS)

        assert exc_info.value.type == "token-expired"
        assert exc_info.value.status_code == 401

    def test_wrong_secret(self):
        other = AuthSettings(jwt_secret="another-secret-with-enough-bytes-0000")
        token = create_access_token(1, settings=other)

        with pytest.raises(UnauthorizedException) as exc_info:
            decode_access_token(token, settings=SETTINGS)

        assert exc_info.value.type == "invalid-token"

    def test_garbage_token(self):
        with pytest.raises(UnauthorizedException):
            decode_access_token("not.a.token", settings=SETTINGS)

    def test_non_numeric_subject(self):
        token = jwt.encode(
            {"sub": "abc", "exp": datetime.now(UTC) + timedelta(hours=1)},
            SETTINGS.jwt_secret.get_secret_value(),
            algorithm="HS256",
        )

        with pytest.raises(UnauthorizedException, match="Invalid token subject"):
            decode_access_token(token, settings=SETTINGS)


class TestAuthSettings:
    def test_production_requires_real_secret(self, monkeypatch):
        monkeypatch.delenv("AUTH_JWT_SECRET", raising=False)
        monkeypatch.setenv("APP_ENVIRONMENT", "production")

        with pytest.raises(ValueError, match="AUTH_JWT_SECRET"):
            AuthSettings(_env_file=None)
