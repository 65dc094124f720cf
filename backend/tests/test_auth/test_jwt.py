"""Tests for JWT token creation and decoding."""

from datetime import timedelta

import pytest
from jose import ExpiredSignatureError, JWTError, jwt

from mahjong_ledger.auth.jwt import ALGORITHM, create_access_token, decode_token
from mahjong_ledger.config import settings


class TestCreateAccessToken:

    def test_contains_standard_claims(self):
        token = create_access_token(data={"sub": "admin", "role": "admin"})
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
        assert payload["sub"] == "admin"
        assert payload["role"] == "admin"
        assert {"exp", "iat", "jti"} <= set(payload)

    def test_default_expiry_is_session_hours(self):
        payload = decode_token(create_access_token(data={"sub": "admin"}))
        expected = settings.SESSION_HOURS * 3600
        assert expected - 10 < payload["exp"] - payload["iat"] <= expected

    def test_custom_expiry(self):
        token = create_access_token(data={"sub": "admin"}, expires_delta=timedelta(minutes=30))
        payload = decode_token(token)
        assert 1790 < payload["exp"] - payload["iat"] <= 1800

    def test_token_ids_are_unique(self):
        first = decode_token(create_access_token(data={"sub": "admin"}))
        second = decode_token(create_access_token(data={"sub": "admin"}))
        assert first["jti"] != second["jti"]

    def test_does_not_mutate_input(self):
        data = {"sub": "admin"}
        create_access_token(data=data)
        assert data == {"sub": "admin"}


class TestDecodeToken:

    def test_expired(self):
        token = create_access_token(data={"sub": "admin"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(ExpiredSignatureError):
            decode_token(token)

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "admin"}, "another-secret", algorithm=ALGORITHM)
        with pytest.raises(JWTError):
            decode_token(token)

    def test_garbage(self):
        with pytest.raises(JWTError):
            decode_token("not.a.jwt")
