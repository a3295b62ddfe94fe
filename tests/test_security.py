"""Tests for JWT helpers and the token -> caller identity mapping."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import JWTError

from contacthub.core.config import settings
from contacthub.core.dependencies import user_from_token
from contacthub.core.security import create_access_token, decode_token


def test_token_round_trip_keeps_claims():
    token = create_access_token({"user_id": "mentor-1", "role": "mentor"})

    payload = decode_token(token)

    assert payload["user_id"] == "mentor-1"
    assert payload["role"] == "mentor"
    assert "exp" in payload


def test_expired_token_fails():
    token = create_access_token({"user_id": "mentor-1"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(JWTError):
        decode_token(token)


def test_tampered_token_fails():
    token = create_access_token({"user_id": "mentor-1"})

    with pytest.raises(JWTError):
        decode_token(token[:-2] + ("aa" if not token.endswith("aa") else "bb"))


def test_missing_secret_key_is_a_config_error(monkeypatch):
    monkeypatch.setattr(settings, "SECRET_KEY", "")

    with pytest.raises(ValueError, match="SECRET_KEY"):
        create_access_token({"user_id": "mentor-1"})


def test_user_from_token_defaults_optional_claims():
    user = user_from_token(create_access_token({"user_id": "student-1"}))

    assert user.id == "student-1"
    assert user.name == "student-1"
    assert user.email == ""
    assert user.role == "user"


def test_user_from_token_requires_user_id():
    with pytest.raises(HTTPException) as exc_info:
        user_from_token(create_access_token({"name": "No Id"}))

    assert exc_info.value.status_code == 401
