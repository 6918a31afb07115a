import asyncio
import time

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from httpx import ASGITransport, AsyncClient

from app import common
from app.common import DEV_USER, get_current_user
from app.config import settings
from app.core.errors import ApiError
from app.init_db import get_db
from app.main import app as api


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")
    common.token_cache.clear()
    calls = []
    expires_in = {"good-token": 3600, "short-lived": 0.3, "expired": -1}

    def verify_id_token(token):
        calls.append(token)
        if token not in expires_in:
            raise ValueError("invalid token")
        return {"uid": "firebase-uid", "email": "user@example.com", "exp": time.time() + expires_in[token]}

    monkeypatch.setattr(common.auth, "verify_id_token", verify_id_token)
    yield calls
    common.token_cache.clear()


async def test_development_mode_returns_dev_user():
    user = await get_current_user(None)

    assert user == DEV_USER
    assert user is not DEV_USER


async def test_production_verifies_and_caches_token(production):
    first = await get_current_user(bearer("good-token"))
    second = await get_current_user(bearer("good-token"))

    assert first["uid"] == "firebase-uid"
    assert second == first
    assert production == ["good-token"]


async def test_production_rejects_missing_token(production):
    with pytest.raises(ApiError) as exc_info:
        await get_current_user(None)

    assert exc_info.value.status_code == 401
    assert production == []


async def test_production_rejects_invalid_token(production):
    with pytest.raises(ApiError) as exc_info:
        await get_current_user(bearer("forged"))

    assert exc_info.value.status_code == 401
    assert exc_info.value.code.value == "UNAUTHORIZED"
    assert "forged" not in common.token_cache


async def test_unauthenticated_request_gets_error_envelope(production, session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    api.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=api), base_url="http://test") as ac:
            response = await ac.get("/api/profile")
            authorized = await ac.get("/api/profile", headers={"Authorization": "Bearer good-token"})
    finally:
        api.dependency_overrides.clear()

    assert response.status_code == 401
    assert response.json() == {
        "error": {"code": "UNAUTHORIZED", "message": "Authentication required", "details": None}
    }
    assert authorized.status_code == 200
    assert authorized.json()["id"] == "firebase-uid"


async def test_cached_token_is_dropped_at_its_expiry(production):
    await get_current_user(bearer("short-lived"))
    assert "short-lived" in common.token_cache

    await asyncio.sleep(0.5)

    assert "short-lived" not in common.token_cache
    await get_current_user(bearer("short-lived"))
    assert production == ["short-lived", "short-lived"]


async def test_token_past_expiry_is_not_cached(production):
    await get_current_user(bearer("expired"))

    assert "expired" not in common.token_cache
    await get_current_user(bearer("expired"))
    assert production == ["expired", "expired"]


async def test_cache_lifetime_is_capped_by_ttl(production, monkeypatch):
    monkeypatch.setattr(settings, "token_cache_ttl", 10)
    now = 1_000_000.0

    assert common._token_expiry("tok", {"exp": now + 3600}, now) == now + 10
    assert common._token_expiry("tok", {"exp": now + 5}, now) == now + 5
