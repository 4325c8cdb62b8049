"""Session token tests."""

import jwt
import pytest

from cyberhunt.core.config import settings
from cyberhunt.core.security import create_session_token, decode_session_token


def test_token_round_trip():
    token = create_session_token(7, "analyst", "alice")
    payload = decode_session_token(token)
    assert payload["sub"] == "7"
    assert payload["role"] == "analyst"
    assert payload["username"] == "alice"


def test_previous_secret_still_accepted(monkeypatch):
    old_token = create_session_token(7, "admin", "root")
    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", settings.JWT_SECRET)
    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret")

    assert decode_session_token(old_token)["sub"] == "7"


def test_unknown_secret_rejected(monkeypatch):
    token = create_session_token(7, "admin", "root")
    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret")
    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", "")

    with pytest.raises(jwt.InvalidTokenError):
        decode_session_token(token)


@pytest.mark.asyncio
async def test_unknown_role_is_forbidden(client):
    token = create_session_token(7, "superuser", "root")
    resp = await client.get("/reviews", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_garbage_token_is_unauthorized(client):
    resp = await client.get("/reviews", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
