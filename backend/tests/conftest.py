# backend/tests/conftest.py
from __future__ import annotations

import asyncio
import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Dict, List, Optional
import uuid

# Vor dem Import von spacetime setzen: kein Schema-Autocreate auf der Default-DB
os.environ.setdefault("AUTO_CREATE_SCHEMA", "false")
os.environ.setdefault("AUTH_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from spacetime.database import create_schema, get_db, make_engine, make_session_factory
from spacetime.services.memory.memory_store import RecordNotFoundError

USER_ID = "9af59216-0ecd-4ba4-a08e-e15dfd2cad76"


class FakeMemoryStore:
    """Dict-backed store; ``created_at`` ticks forward one second per insert."""

    def __init__(self) -> None:
        self.rows: Dict[str, SimpleNamespace] = {}
        self.calls: List[str] = []
        self._clock = datetime(2023, 5, 17, 12, 0, tzinfo=timezone.utc)

    async def find_many(self):
        self.calls.append("find_many")
        return sorted(self.rows.values(), key=lambda r: r.created_at)

    async def find_by_id(self, memory_id: str) -> Optional[SimpleNamespace]:
        self.calls.append("find_by_id")
        return self.rows.get(memory_id)

    async def create(self, *, content, cover_url, is_public, user_id):
        self.calls.append("create")
        self._clock += timedelta(seconds=1)
        row = SimpleNamespace(
            id=str(uuid.uuid4()),
            content=content,
            cover_url=cover_url,
            is_public=is_public,
            user_id=user_id,
            created_at=self._clock,
        )
        self.rows[row.id] = row
        return row

    async def update(self, memory_id, *, content, cover_url, is_public):
        self.calls.append("update")
        row = self.rows.get(memory_id)
        if row is None:
            raise RecordNotFoundError(memory_id)
        row.content, row.cover_url, row.is_public = content, cover_url, is_public
        return row

    async def delete(self, memory_id):
        self.calls.append("delete")
        if self.rows.pop(memory_id, None) is None:
            raise RecordNotFoundError(memory_id)


class UntouchableStore:
    """Fails the test if the handler reaches the store at all."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def __getattr__(self, name):
        async def _called(*_args, **_kwargs):
            self.calls.append(name)
            raise AssertionError(f"store.{name} must not be called")

        return _called


class BrokenStore:
    """Every operation fails like a lost database connection."""

    def __getattr__(self, name):
        async def _broken(*_args, **_kwargs):
            raise ConnectionError("could not connect to server: Connection refused")

        return _broken


@pytest.fixture()
def fake_store() -> FakeMemoryStore:
    return FakeMemoryStore()


@pytest.fixture()
def session_factory(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'memories.db'}", poolclass=NullPool)
    asyncio.run(create_schema(engine))
    yield make_session_factory(engine)
    asyncio.run(engine.dispose())


@pytest.fixture()
def client(session_factory):
    from spacetime.main import app

    async def _test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _test_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
