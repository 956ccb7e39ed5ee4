# 📁 backend/spacetime/services/memory/memory_handler.py
"""
Memory Resource Handler
=======================
Die fünf Operationen (list, get, create, update, delete) über einem
``MemoryStore``. Jede Operation validiert zuerst die Eingabe, ruft genau eine
Store-Operation auf und liefert ``Ok``/``Err`` zurück; Exceptions verlassen
den Handler nie.
"""

from __future__ import annotations

from typing import Any, Dict, List

import structlog
from pydantic import ValidationError

from spacetime.api.v1.schemas.memory import (
    MemoryBody,
    MemoryDeleted,
    MemoryIdParams,
    MemoryRead,
    MemorySummary,
)
from spacetime.core.errors import Err, ErrorKind, Ok, Result
from spacetime.services.auth.dependencies import CurrentUser
from spacetime.services.memory.memory_store import MemoryRecord, MemoryStore, RecordNotFoundError

log = structlog.get_logger(__name__)

EXCERPT_LENGTH = 115
EXCERPT_SUFFIX = "..."

NOT_FOUND_MESSAGE = "Memory not found."
INVALID_ID_MESSAGE = "Invalid memory id."
INVALID_BODY_MESSAGE = "Invalid memory payload."


def make_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    """Fixed prefix of ``content`` plus ``"..."``; the suffix is appended even for short content."""
    return content[:length] + EXCERPT_SUFFIX


def summarize(record: MemoryRecord, excerpt_length: int = EXCERPT_LENGTH) -> MemorySummary:
    return MemorySummary(
        id=record.id,
        coverURL=record.cover_url,
        excerpt=make_excerpt(record.content, excerpt_length),
    )


def _field_errors(exc: ValidationError) -> List[Dict[str, Any]]:
    details = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ())) or "body"
        details.append({"field": loc, "message": error.get("msg", "invalid value")})
    return details


class MemoryHandler:
    def __init__(
        self,
        store: MemoryStore,
        current_user: CurrentUser,
        *,
        excerpt_length: int = EXCERPT_LENGTH,
    ) -> None:
        self.store = store
        self.current_user = current_user
        self.excerpt_length = excerpt_length

    # ------------------------------------------------------------------
    # Validierung
    # ------------------------------------------------------------------
    @staticmethod
    def _parse_id(memory_id: Any) -> Result[str]:
        try:
            params = MemoryIdParams.model_validate({"id": memory_id})
        except ValidationError:
            log.info("memory_invalid_id", memory_id=str(memory_id)[:64])
            return Err(ErrorKind.VALIDATION, INVALID_ID_MESSAGE)
        return Ok(params.id.lower())

    @staticmethod
    def _parse_body(payload: Any) -> Result[MemoryBody]:
        try:
            return Ok(MemoryBody.model_validate(payload))
        except ValidationError as exc:
            details = _field_errors(exc)
            log.info("memory_invalid_payload", errors=len(details))
            return Err(ErrorKind.VALIDATION, INVALID_BODY_MESSAGE, details)

    # ------------------------------------------------------------------
    # Operationen
    # ------------------------------------------------------------------
    async def list_memories(self) -> Result[List[MemorySummary]]:
        try:
            records = await self.store.find_many()
        except Exception:
            log.exception("memory_store_failed", operation="list")
            return Err(ErrorKind.PERSISTENCE, "An error occurred while fetching memories.")
        return Ok([summarize(r, self.excerpt_length) for r in records])

    async def get_memory(self, memory_id: Any) -> Result[MemoryRead]:
        parsed = self._parse_id(memory_id)
        if not parsed.ok:
            return parsed
        try:
            record = await self.store.find_by_id(parsed.value)
        except Exception:
            log.exception("memory_store_failed", operation="get", memory_id=parsed.value)
            return Err(ErrorKind.PERSISTENCE, "An error occurred while fetching the memory.")
        if record is None:
            return Err(ErrorKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        return Ok(MemoryRead.model_validate(record))

    async def create_memory(self, payload: Any) -> Result[MemoryRead]:
        body = self._parse_body(payload)
        if not body.ok:
            return body
        data = body.value
        try:
            user_id = self.current_user()
            record = await self.store.create(
                content=data.content,
                cover_url=data.cover_url,
                is_public=data.is_public,
                user_id=user_id,
            )
        except Exception:
            log.exception("memory_store_failed", operation="create")
            return Err(ErrorKind.PERSISTENCE, "An error occurred while creating the memory.")
        log.info("memory_created", memory_id=record.id, user_id=record.user_id)
        return Ok(MemoryRead.model_validate(record))

    async def update_memory(self, memory_id: Any, payload: Any) -> Result[MemoryRead]:
        parsed = self._parse_id(memory_id)
        if not parsed.ok:
            return parsed
        body = self._parse_body(payload)
        if not body.ok:
            return body
        data = body.value
        try:
            record = await self.store.update(
                parsed.value,
                content=data.content,
                cover_url=data.cover_url,
                is_public=data.is_public,
            )
        except RecordNotFoundError:
            return Err(ErrorKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        except Exception:
            log.exception("memory_store_failed", operation="update", memory_id=parsed.value)
            return Err(ErrorKind.PERSISTENCE, "An error occurred while updating the memory.")
        log.info("memory_updated", memory_id=record.id)
        return Ok(MemoryRead.model_validate(record))

    async def delete_memory(self, memory_id: Any) -> Result[MemoryDeleted]:
        parsed = self._parse_id(memory_id)
        if not parsed.ok:
            return parsed
        try:
            await self.store.delete(parsed.value)
        except RecordNotFoundError:
            return Err(ErrorKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        except Exception:
            log.exception("memory_store_failed", operation="delete", memory_id=parsed.value)
            return Err(ErrorKind.PERSISTENCE, "An error occurred while deleting the memory.")
        log.info("memory_deleted", memory_id=parsed.value)
        return Ok(MemoryDeleted())
