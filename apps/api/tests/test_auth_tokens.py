"""
Test password hashing and access tokens.
"""

from datetime import datetime, timedelta

import pytest
from jose import jwt

from config import get_settings
from core.auth import (
    Principal,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from core.exceptions import InvalidTokenError


def test_password_hash_round_trip():
    hashed = hash_password("Str0ng!Pass")

    assert hashed != "Str0ng!Pass"
    assert verify_password("Str0ng!Pass", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_malformed_hash_does_not_verify():
    assert not verify_password("Str0ng!Pass", "not-a-bcrypt-hash")


def test_token_carries_principal():
    token = create_access_token("user-1", "a@example.com")
    assert decode_access_token(token) == Principal(user_id="user-1", email="a@example.com")


def test_expired_token_is_rejected():
    token = create_access_token("user-1", "a@example.com", expires_delta=timedelta(seconds=-5))
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode(
        {"sub": "user-1", "type": "access", "exp": datetime.utcnow() + timedelta(minutes=5)},
        "another-secret-that-is-at-least-32-characters",
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_non_access_token_is_rejected():
    settings = get_settings()
    token = jwt.encode(
        {"sub": "user-1", "type": "refresh", "exp": datetime.utcnow() + timedelta(minutes=5)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(InvalidTokenError):
        decode_access_token("definitely.not.a-jwt")
