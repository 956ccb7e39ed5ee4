# 📁 backend/spacetime/models/memory.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.types import TypeDecorator

from spacetime.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """Timestamps always leave the database as aware UTC (SQLite returns naive values)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def _utcnow() -> datetime:
    # App-seitig gesetzt: SQLite-now() hat nur Sekundenauflösung
    return datetime.now(timezone.utc)


class Memory(Base):
    __tablename__ = "memories"

    id = Column(String(36), primary_key=True, default=_new_id)
    content = Column(Text, nullable=False)
    cover_url = Column("coverUrl", String, nullable=False)
    is_public = Column("isPublic", Boolean, nullable=False, default=False)
    user_id = Column("userId", String(36), index=True, nullable=False)
    created_at = Column("createdAt", UTCDateTime(), index=True, nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<Memory id={self.id} user_id={self.user_id}>"
