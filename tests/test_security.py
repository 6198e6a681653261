"""Tests for password hashing and bearer tokens."""
import logging
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from gamehive.server import security
from gamehive.server.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
    warn_if_default_secret,
)
from gamehive.server.main import app
from gamehive.server.settings import DEFAULT_JWT_SECRET, settings


def test_password_hash_roundtrip():
    hashed = hash_password("hunter2")

    assert hashed != "hunter2"
    assert verify_password(hashed, "hunter2")
    assert not verify_password(hashed, "hunter3")


def test_verify_password_without_hash():
    assert not verify_password(None, "anything")


def test_token_expires_in_seven_days():
    token = create_access_token("uid-1", "alice", "alice@example.com")

    claims = decode_access_token(token)

    assert claims["sub"] == "uid-1"
    assert claims["username"] == "alice"
    assert claims["email"] == "alice@example.com"
    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())


def test_expired_token_rejected():
    past = datetime.now(timezone.utc) - timedelta(days=8)
    token = jwt.encode(
        {
            "sub": "uid-1",
            "username": "alice",
            "email": "alice@example.com",
            "iat": past,
            "exp": past + timedelta(days=7),
        },
        settings.JWT_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_token_signed_with_other_secret_rejected():
    token = jwt.encode(
        {
            "sub": "uid-1",
            "username": "alice",
            "email": "alice@example.com",
            "exp": datetime.now(timezone.utc) + timedelta(days=1),
        },
        "some-other-secret-that-is-long-enough",
        algorithm="HS256",
    )

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_token_missing_claims_rejected():
    token = jwt.encode(
        {"sub": "uid-1", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        settings.JWT_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_algorithm_list_parsing(monkeypatch):
    monkeypatch.setattr(settings, "JWT_ALGORITHM", " HS512 , HS256 ")

    assert security._get_algorithms() == ["HS512", "HS256"]


def test_default_secret_warns(monkeypatch, caplog):
    monkeypatch.setattr(settings, "JWT_SECRET", DEFAULT_JWT_SECRET)

    with caplog.at_level(logging.WARNING, logger="gamehive.server.security"):
        assert warn_if_default_secret() is True

    assert "JWT_SECRET" in caplog.text


def test_custom_secret_does_not_warn(monkeypatch, caplog):
    monkeypatch.setattr(settings, "JWT_SECRET", "a-real-deployment-secret-of-sufficient-length")

    with caplog.at_level(logging.WARNING, logger="gamehive.server.security"):
        assert warn_if_default_secret() is False

    assert "JWT_SECRET" not in caplog.text


def test_startup_warns_about_default_secret(monkeypatch, caplog):
    """Given: JWT_SECRET 미설정 (기본값)
    When: 앱이 시작되면
    Then: 경고 로그가 남아야 함
    """
    monkeypatch.setattr(settings, "JWT_SECRET", DEFAULT_JWT_SECRET)
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "memory")

    with caplog.at_level(logging.WARNING):
        with TestClient(app):
            pass

    assert any(
        record.name == "gamehive.server.security" and "JWT_SECRET" in record.getMessage()
        for record in caplog.records
    )
