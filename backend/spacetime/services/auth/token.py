"""
Bearer-Token-Prüfung gegen den OIDC-Issuer (Keycloak).

Nur aktiv, wenn ``AUTH_ENABLED=true``. Der JWKS wird asynchron geholt und
mit TTL gecacht; ein unbekannter ``kid`` erzwingt genau einen Refresh
(Key-Rotation beim Issuer). Fehler werden als ``ValueError`` gemeldet.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx
from jose import JWTError, jwt

from spacetime.core.config import settings

log = logging.getLogger("uvicorn.error")

ALLOWED_ALGS = ("RS256",)

_JWKS_CACHE: Dict[str, Any] = {"data": None, "ts": 0.0}


async def _fetch_jwks() -> dict:
    async with httpx.AsyncClient(timeout=5.0) as client:
        resp = await client.get(settings.keycloak_jwks_url)
        resp.raise_for_status()
        return resp.json()


async def _get_jwks(force: bool = False) -> dict:
    now = time.time()
    fresh = now - _JWKS_CACHE["ts"] < settings.jwks_ttl_sec
    if _JWKS_CACHE["data"] is not None and fresh and not force:
        return _JWKS_CACHE["data"]
    log.info("Fetching JWKS from %s", settings.keycloak_jwks_url)
    _JWKS_CACHE["data"] = await _fetch_jwks()
    _JWKS_CACHE["ts"] = now
    return _JWKS_CACHE["data"]


def jwks_clear() -> None:
    _JWKS_CACHE["data"] = None
    _JWKS_CACHE["ts"] = 0.0


def _lookup(jwks: dict, kid: str) -> Optional[dict]:
    return next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)


async def find_key(kid: str) -> dict:
    key = _lookup(await _get_jwks(), kid)
    if key is None:
        # miss? einmal neu laden
        key = _lookup(await _get_jwks(force=True), kid)
    if key is None:
        raise JWTError(f"kid {kid!r} not found in JWKS")
    return key


def audience_allowed(claims: dict[str, Any], allowed: set[str]) -> bool:
    aud = claims.get("aud")
    return (
        (isinstance(aud, str) and aud in allowed)
        or (isinstance(aud, list) and any(a in allowed for a in aud))
        or (claims.get("azp") in allowed)
        or (claims.get("client_id") in allowed)
    )


async def verify_access_token(token: str) -> dict[str, Any]:
    """Return the verified claims; raise ``ValueError`` for any invalid token."""
    try:
        header = jwt.get_unverified_header(token)
        if header.get("alg") not in ALLOWED_ALGS:
            raise JWTError(f"unsupported alg {header.get('alg')!r}")
        kid = header.get("kid")
        if not kid:
            raise JWTError("token header missing 'kid'")

        key = await find_key(kid)
        claims: dict[str, Any] = jwt.decode(
            token,
            key,
            algorithms=list(ALLOWED_ALGS),
            issuer=settings.keycloak_issuer,
            options={"verify_aud": False},  # aud separat prüfen
        )
        if not audience_allowed(claims, set(settings.keycloak_allowed_audiences)):
            raise JWTError(f"audience not allowed (aud={claims.get('aud')!r}, azp={claims.get('azp')!r})")

        log.debug("JWT verified (kid=%s)", kid)
        return claims
    except (JWTError, httpx.HTTPError) as exc:
        log.warning("JWT verify failed: %s", exc)
        raise ValueError(str(exc)) from exc
