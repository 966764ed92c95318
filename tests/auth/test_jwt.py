"""Tests for JWT access tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from crownhike.auth.jwt import create_access_token, verify_token
from crownhike.config import get_settings


def _encode(**overrides: object) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": "1",
        "email": "hiker@example.com",
        "iat": now,
        "exp": now + timedelta(minutes=5),
        "iss": settings.jwt_issuer,
        "type": "access",
    }
    payload.update(overrides)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class TestAccessToken:
    def test_create_and_verify(self):
        token = create_access_token(user_id=7, email="hiker@example.com")
        payload = verify_token(token)
        assert payload["sub"] == "7"
        assert payload["email"] == "hiker@example.com"
        assert payload["type"] == "access"
        assert payload["iss"] == get_settings().jwt_issuer

    def test_default_lifetime_is_a_week(self):
        payload = verify_token(create_access_token(user_id=1, email="a@example.com"))
        assert payload["exp"] - payload["iat"] == 7 * 24 * 3600

    def test_expired_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = _encode(iat=past - timedelta(minutes=5), exp=past)
        with pytest.raises(jwt.InvalidTokenError, match="expired"):
            verify_token(token)

    def test_wrong_type_rejected(self):
        with pytest.raises(jwt.InvalidTokenError, match="Expected token type"):
            verify_token(_encode(type="refresh"))

    def test_wrong_issuer_rejected(self):
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(_encode(iss="someone-else"))

    def test_wrong_secret_rejected(self):
        token = jwt.encode(
            {"sub": "1", "exp": datetime.now(timezone.utc) + timedelta(minutes=5), "type": "access"},
            "a-completely-different-secret-value",
            algorithm="HS256",
        )
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(jwt.InvalidTokenError):
            verify_token("not-a-jwt")
