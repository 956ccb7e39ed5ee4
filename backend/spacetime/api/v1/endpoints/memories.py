# backend/spacetime/api/v1/endpoints/memories.py
from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from spacetime.api.v1.schemas.memory import ErrorResponse, MemoryDeleted, MemoryRead, MemorySummary
from spacetime.core.config import settings
from spacetime.core.errors import Err, Result
from spacetime.database import get_db
from spacetime.services.auth.dependencies import CurrentUser, get_current_user
from spacetime.services.memory.memory_handler import MemoryHandler
from spacetime.services.memory.memory_store import SqlAlchemyMemoryStore

router = APIRouter(prefix="/memories", tags=["memories"])

_ID_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid memory id or payload"},
    404: {"model": ErrorResponse, "description": "Memory not found"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}


def get_memory_handler(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> MemoryHandler:
    return MemoryHandler(
        SqlAlchemyMemoryStore(db),
        current_user,
        excerpt_length=settings.excerpt_length,
    )


def _respond(result: Result[Any]) -> Any:
    if isinstance(result, Err):
        return JSONResponse(result.to_payload(), status_code=result.status_code)
    return result.value


# ----------------------------------------------------------------------
# List
# ----------------------------------------------------------------------
@router.get(
    "",
    response_model=List[MemorySummary],
    responses={500: _ID_ERRORS[500]},
    summary="List memories, oldest first",
)
async def list_memories(handler: MemoryHandler = Depends(get_memory_handler)):
    return _respond(await handler.list_memories())


# ----------------------------------------------------------------------
# Get by id
# ----------------------------------------------------------------------
@router.get("/{memory_id}", response_model=MemoryRead, responses=_ID_ERRORS, summary="Fetch one memory")
async def get_memory(memory_id: str, handler: MemoryHandler = Depends(get_memory_handler)):
    return _respond(await handler.get_memory(memory_id))


# ----------------------------------------------------------------------
# Create
# ----------------------------------------------------------------------
@router.post(
    "",
    response_model=MemoryRead,
    responses={400: _ID_ERRORS[400], 500: _ID_ERRORS[500]},
    summary="Create a memory",
)
async def create_memory(
    payload: Any = Body(default=None),
    handler: MemoryHandler = Depends(get_memory_handler),
):
    """
    Erwartet JSON:
    {
      "content": "…Pflicht…",
      "coverURL": "…Pflicht…",
      "isPublic": false
    }
    """
    return _respond(await handler.create_memory(payload))


# ----------------------------------------------------------------------
# Update (full replace)
# ----------------------------------------------------------------------
@router.put("/{memory_id}", response_model=MemoryRead, responses=_ID_ERRORS, summary="Replace a memory")
async def update_memory(
    memory_id: str,
    payload: Any = Body(default=None),
    handler: MemoryHandler = Depends(get_memory_handler),
):
    return _respond(await handler.update_memory(memory_id, payload))


# ----------------------------------------------------------------------
# Delete
# ----------------------------------------------------------------------
@router.delete("/{memory_id}", response_model=MemoryDeleted, responses=_ID_ERRORS, summary="Delete a memory")
async def delete_memory(memory_id: str, handler: MemoryHandler = Depends(get_memory_handler)):
    return _respond(await handler.delete_memory(memory_id))
