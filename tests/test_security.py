"""Tests for password hashing and access token signing."""

from datetime import timedelta
from types import SimpleNamespace

import pytest
from jose import jwt

from xclone.core.exceptions import AuthError
from xclone.core.security import (
    ALGORITHM,
    create_access_token,
    hash_password,
    verify_password,
)
from xclone.services.auth import AuthService


def make_user(**overrides):
    fields = {"id": 7, "username": "alice01", "first_name": "Alice", "last_name": "Smith"}
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("password1", rounds=4)
        assert hashed != "password1"
        assert hashed.startswith("$2")

    def test_hash_is_salted(self):
        assert hash_password("password1", rounds=4) != hash_password("password1", rounds=4)

    def test_verify(self):
        hashed = hash_password("password1", rounds=4)
        assert verify_password("password1", hashed)
        assert not verify_password("password2", hashed)


class TestAccessTokens:
    def test_claims(self, settings):
        service = AuthService(None, settings)
        token = service.generate_access_token(make_user())

        claims = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
        assert claims["user_id"] == 7
        assert claims["username"] == "alice01"
        assert claims["first_name"] == "Alice"
        assert claims["last_name"] == "Smith"
        assert isinstance(claims["exp"], int)

    def test_validate_round_trip(self, settings):
        service = AuthService(None, settings)
        claims = service.validate_access_token(service.generate_access_token(make_user()))
        assert claims["user_id"] == 7

    def test_zero_ttl_is_rejected(self, settings):
        settings.access_token_ttl = timedelta(0)
        service = AuthService(None, settings)
        token = service.generate_access_token(make_user())
        with pytest.raises(AuthError):
            service.validate_access_token(token)

    def test_expired_token_is_rejected(self, settings):
        token = create_access_token({"user_id": 7}, settings.jwt_secret, timedelta(minutes=-1))
        with pytest.raises(AuthError):
            AuthService(None, settings).validate_access_token(token)

    def test_wrong_secret_is_rejected(self, settings):
        token = create_access_token({"user_id": 7}, "another-secret", timedelta(minutes=5))
        with pytest.raises(AuthError):
            AuthService(None, settings).validate_access_token(token)

    def test_malformed_token_is_rejected(self, settings):
        with pytest.raises(AuthError):
            AuthService(None, settings).validate_access_token("not-a-token")

    def test_missing_user_id_is_rejected(self, settings):
        token = create_access_token({"username": "alice01"}, settings.jwt_secret, timedelta(minutes=5))
        with pytest.raises(AuthError):
            AuthService(None, settings).validate_access_token(token)
