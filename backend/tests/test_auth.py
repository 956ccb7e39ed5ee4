# backend/tests/test_auth.py
from __future__ import annotations

import asyncio

import pytest

from spacetime.core.config import settings
from spacetime.services.auth import token as token_utils
from spacetime.services.auth.dependencies import StaticUser

TOKEN_SUB = "5d0c2f8e-1a3b-4c6d-8e9f-0a1b2c3d4e5f"
BODY = {"content": "hello world", "coverURL": "http://x/img.png"}


@pytest.fixture()
def auth_on(monkeypatch):
    monkeypatch.setattr(settings, "auth_enabled", True)

    async def _verify(tok: str) -> dict:
        if tok != "good-token":
            raise ValueError("signature verification failed")
        return {"sub": TOKEN_SUB, "aud": "account"}

    monkeypatch.setattr(token_utils, "verify_access_token", _verify)


def test_static_user_returns_fixed_id():
    user = StaticUser("abc")
    assert user() == "abc"
    assert user() == "abc"


def test_default_user_owns_memories_when_auth_disabled(client):
    resp = client.post("/memories", json=BODY)
    assert resp.status_code == 200
    assert resp.json()["userId"] == settings.default_user_id


def test_missing_bearer_is_401(client, auth_on):
    resp = client.post("/memories", json=BODY)
    assert resp.status_code == 401
    assert "error" in resp.json()


def test_invalid_bearer_is_401(client, auth_on):
    resp = client.get("/memories", headers={"Authorization": "Bearer forged"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid access token"}


def test_token_subject_becomes_owner(client, auth_on):
    resp = client.post("/memories", json=BODY, headers={"Authorization": "Bearer good-token"})
    assert resp.status_code == 200
    assert resp.json()["userId"] == TOKEN_SUB


@pytest.mark.parametrize(
    "claims, ok",
    [
        ({"aud": "account"}, True),
        ({"aud": ["other", "account"]}, True),
        ({"aud": "other", "azp": "account"}, True),
        ({"aud": "other"}, False),
        ({}, False),
    ],
)
def test_audience_allowed(claims, ok):
    assert token_utils.audience_allowed(claims, {"account"}) is ok


def test_verify_rejects_non_rs256_token():
    # {"alg":"HS256","typ":"JWT"}
    forged = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.e30.c2lnbmF0dXJl"
    with pytest.raises(ValueError):
        asyncio.run(token_utils.verify_access_token(forged))


# ----------------------------------------------------------------------
# JWKS: unbekannter kid → genau ein Refresh
# ----------------------------------------------------------------------
# {"alg":"RS256","kid":"rotated"}
ROTATED_KID_TOKEN = "eyJhbGciOiJSUzI1NiIsImtpZCI6InJvdGF0ZWQifQ.e30.c2ln"


@pytest.fixture()
def jwks_sequence(monkeypatch):
    """Serve JWKS documents in order; the last one repeats."""
    fetched = []
    documents = []

    async def _fetch():
        doc = documents[min(len(fetched), len(documents) - 1)]
        fetched.append(doc)
        return doc

    token_utils.jwks_clear()
    monkeypatch.setattr(token_utils, "_fetch_jwks", _fetch)
    yield documents, fetched
    token_utils.jwks_clear()


def test_unknown_kid_refetches_once_then_fails(jwks_sequence):
    documents, fetched = jwks_sequence
    documents.append({"keys": [{"kid": "old", "kty": "RSA"}]})

    with pytest.raises(ValueError, match="rotated"):
        asyncio.run(token_utils.verify_access_token(ROTATED_KID_TOKEN))
    assert len(fetched) == 2


def test_rotated_kid_is_found_after_refresh(jwks_sequence, monkeypatch):
    documents, fetched = jwks_sequence
    rotated = {"kid": "rotated", "kty": "RSA"}
    documents.extend([{"keys": [{"kid": "old", "kty": "RSA"}]}, {"keys": [rotated]}])
    seen = {}

    def _decode(tok, key, **_kwargs):
        seen["key"] = key
        return {"sub": TOKEN_SUB, "aud": "account"}

    monkeypatch.setattr(token_utils.jwt, "decode", _decode)

    claims = asyncio.run(token_utils.verify_access_token(ROTATED_KID_TOKEN))
    assert claims["sub"] == TOKEN_SUB
    assert seen["key"] == rotated
    assert len(fetched) == 2


def test_cached_jwks_is_reused(jwks_sequence):
    documents, fetched = jwks_sequence
    documents.append({"keys": [{"kid": "rotated", "kty": "RSA"}]})

    asyncio.run(token_utils.find_key("rotated"))
    asyncio.run(token_utils.find_key("rotated"))
    assert len(fetched) == 1
