from datetime import datetime, timedelta, timezone

import jwt
import pytest

from auth_helper import TOKEN_ALGORITHM, MissingSecretError, compare_password, hash_password, issue_token, verify_token
from config import settings


def test_hash_password_is_salted_and_verifiable():
    first = hash_password("password123")
    second = hash_password("password123")

    assert first != "password123"
    assert first != second
    assert compare_password("password123", first)
    assert not compare_password("wrong", first)


def test_compare_password_rejects_malformed_hash():
    assert compare_password("password123", "not-a-hash") is False
    assert compare_password("password123", None) is False


def test_token_round_trip_carries_user_id():
    token = issue_token("507f1f77bcf86cd799439011")
    payload = verify_token(token)

    assert payload["_id"] == "507f1f77bcf86cd799439011"
    lifetime = payload["exp"] - payload["iat"]
    assert lifetime == int(timedelta(days=7).total_seconds())


def test_expired_token_is_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"_id": "abc", "iat": now - timedelta(days=8), "exp": now - timedelta(days=1)},
        settings.jwt_secret,
        algorithm=TOKEN_ALGORITHM,
    )
    with pytest.raises(jwt.ExpiredSignatureError):
        verify_token(token)


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"_id": "abc"}, "another-secret-0123456789abcdef-xyz", algorithm=TOKEN_ALGORITHM)
    with pytest.raises(jwt.InvalidSignatureError):
        verify_token(token)


def test_tokens_refused_without_secret(monkeypatch):
    token = issue_token("507f1f77bcf86cd799439011")
    monkeypatch.setattr(settings, "jwt_secret", None)

    with pytest.raises(MissingSecretError):
        issue_token("507f1f77bcf86cd799439011")
    with pytest.raises(MissingSecretError):
        verify_token(token)
