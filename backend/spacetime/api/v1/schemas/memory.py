from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr
from pydantic.alias_generators import to_camel

# Textform einer UUID (8-4-4-4-12 Hex), wie sie der Store vergibt
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"


class MemoryIdParams(BaseModel):
    id: StrictStr = Field(..., pattern=UUID_PATTERN)


class MemoryBody(BaseModel):
    """Request body for create and update (full replace)."""

    content: StrictStr = Field(..., min_length=1)
    cover_url: StrictStr = Field(..., alias="coverURL")
    is_public: StrictBool = Field(default=False, alias="isPublic")


class MemoryRead(BaseModel):
    """Full memory record, exposed with the stored camelCase field names."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    content: str
    cover_url: str
    is_public: bool
    user_id: str
    created_at: datetime


class MemorySummary(BaseModel):
    id: str
    coverURL: str
    excerpt: str


class MemoryDeleted(BaseModel):
    message: str = "Memory deleted successfully."


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    kind: str
    details: Optional[List[ErrorDetail]] = None
