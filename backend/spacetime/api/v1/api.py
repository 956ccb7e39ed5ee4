from __future__ import annotations

from fastapi import APIRouter

from spacetime.api.v1.endpoints import memories

api_router = APIRouter()

# REST
api_router.include_router(memories.router)   # → /memories, /memories/{id}
