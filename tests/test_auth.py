"""Tests for the admin session issuer and cookie settings."""

from datetime import timedelta

import pytest
from fastapi import Response
from jose import jwt

from chattu_admin.auth import AdminSessionIssuer, ALGORITHM, TOKEN_COOKIE_NAME
from chattu_admin.config import Settings
from chattu_admin.errors import Unauthorized


@pytest.fixture
def issuer():
    return AdminSessionIssuer(Settings(admin_secret_key="S3cr3t", jwt_secret="test-jwt-secret"))


def test_login_returns_verifiable_token(issuer):
    token = issuer.login("S3cr3t")
    assert issuer.verify(token)

    claims = jwt.decode(token, "test-jwt-secret", algorithms=[ALGORITHM])
    assert claims["type"] == "admin"
    assert claims["exp"] - claims["iat"] == 15 * 60


def test_login_is_exact_match(issuer):
    for attempt in ("s3cr3t", "S3cr3t ", "", None, 123):
        with pytest.raises(Unauthorized) as exc_info:
            issuer.login(attempt)
        assert exc_info.value.message == "Invalid Secret Key"
        assert exc_info.value.status_code == 401


def test_expired_token_fails_verification(issuer):
    token = issuer.create_token(expires_delta=timedelta(seconds=-1))
    assert not issuer.verify(token)


def test_token_with_wrong_type_fails_verification(issuer):
    token = jwt.encode({"type": "user"}, "test-jwt-secret", algorithm=ALGORITHM)
    assert not issuer.verify(token)


def test_garbage_token_fails_verification(issuer):
    assert not issuer.verify("not-a-jwt")


def test_logout_cookie(issuer):
    response = Response()
    issuer.logout(response)
    cookie = response.headers["set-cookie"]
    assert cookie.startswith(f"{TOKEN_COOKIE_NAME}=")
    assert "Max-Age=0" in cookie
    assert "HttpOnly" in cookie


def test_secure_cookie_defaults_to_samesite_none():
    issuer = AdminSessionIssuer(Settings(admin_secret_key="x", cookie_secure=True))
    response = Response()
    issuer.set_cookie(response, "token")
    cookie = response.headers["set-cookie"]
    assert "Secure" in cookie
    assert "SameSite=none" in cookie


def test_explicit_samesite_wins():
    settings = Settings(cookie_secure=True, cookie_samesite="Strict")
    assert settings.effective_samesite == "strict"


def test_token_without_secret_fingerprint_fails_verification(issuer):
    token = jwt.encode({"type": "admin"}, "test-jwt-secret", algorithm=ALGORITHM)
    assert not issuer.verify(token)


def test_rotated_secret_invalidates_issued_tokens(issuer):
    token = issuer.login("S3cr3t")
    issuer.settings.admin_secret_key = "R0tat3d"
    assert not issuer.verify(token)
    assert issuer.verify(issuer.login("R0tat3d"))
