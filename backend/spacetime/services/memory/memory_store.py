# 📁 backend/spacetime/services/memory/memory_store.py
"""
Persistence collaborator for memories.

``MemoryStore`` is the interface the handler depends on;
``SqlAlchemyMemoryStore`` implements it on top of an ``AsyncSession``.
Each method issues a single statement and commits on its own.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from spacetime.models.memory import Memory


class RecordNotFoundError(LookupError):
    """No memory matches the given id."""

    def __init__(self, memory_id: str) -> None:
        super().__init__(f"memory {memory_id!r} not found")
        self.memory_id = memory_id


class MemoryRecord(Protocol):
    id: str
    content: str
    cover_url: str
    is_public: bool
    user_id: str
    created_at: datetime


class MemoryStore(Protocol):
    async def find_many(self) -> List[MemoryRecord]: ...

    async def find_by_id(self, memory_id: str) -> Optional[MemoryRecord]: ...

    async def create(self, *, content: str, cover_url: str, is_public: bool, user_id: str) -> MemoryRecord: ...

    async def update(self, memory_id: str, *, content: str, cover_url: str, is_public: bool) -> MemoryRecord: ...

    async def delete(self, memory_id: str) -> None: ...


class SqlAlchemyMemoryStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_many(self) -> List[Memory]:
        result = await self.session.execute(select(Memory).order_by(Memory.created_at.asc()))
        return list(result.scalars().all())

    async def find_by_id(self, memory_id: str) -> Optional[Memory]:
        return await self.session.get(Memory, memory_id)

    async def create(self, *, content: str, cover_url: str, is_public: bool, user_id: str) -> Memory:
        memory = Memory(content=content, cover_url=cover_url, is_public=is_public, user_id=user_id)
        self.session.add(memory)
        await self._commit()
        await self.session.refresh(memory)
        return memory

    async def update(self, memory_id: str, *, content: str, cover_url: str, is_public: bool) -> Memory:
        memory = await self.session.get(Memory, memory_id)
        if memory is None:
            raise RecordNotFoundError(memory_id)
        memory.content = content
        memory.cover_url = cover_url
        memory.is_public = is_public
        await self._commit()
        await self.session.refresh(memory)
        return memory

    async def delete(self, memory_id: str) -> None:
        result = await self.session.execute(delete(Memory).where(Memory.id == memory_id))
        if result.rowcount == 0:
            await self.session.rollback()
            raise RecordNotFoundError(memory_id)
        await self._commit()

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
