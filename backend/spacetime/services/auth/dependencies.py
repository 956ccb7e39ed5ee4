# 📁 backend/spacetime/services/auth/dependencies.py
"""
Auth-Dependencies für FastAPI-Endpoints.

* ``CurrentUser`` ist jede Funktion ``() -> user_id``
* ohne Auth: fester User aus ``settings.default_user_id``
* mit ``AUTH_ENABLED=true``: Bearer-Token (Keycloak / OIDC) prüfen, ``sub`` liefern
"""

from __future__ import annotations

from typing import Callable

from fastapi import Header, HTTPException, status

from spacetime.core.config import settings
from spacetime.services.auth import token as token_utils
from spacetime.services.auth.jwt_utils import extract_user_id_from_payload

CurrentUser = Callable[[], str]


class StaticUser:
    """Resolver that always yields the same user id."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id

    def __call__(self) -> str:
        return self.user_id

    def __repr__(self) -> str:
        return f"StaticUser({self.user_id!r})"


async def get_current_user(  # noqa: D401 (FastAPI-Namenskonvention)
    authorization: str | None = Header(default=None),
) -> CurrentUser:
    """
    Liefert den Resolver für den aktuellen User,
    bei aktivierter Auth ohne gültiges Token → 401 UNAUTHORIZED.
    """
    if not settings.auth_enabled:
        return StaticUser(settings.default_user_id)

    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing or invalid",
        )

    token = authorization.removeprefix("Bearer ").strip()
    try:
        payload = await token_utils.verify_access_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token",
        ) from exc
    return StaticUser(extract_user_id_from_payload(payload))
