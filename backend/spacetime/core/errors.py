"""
Typed outcomes for the memory handlers.

Every handler operation returns either ``Ok(value)`` or ``Err(kind, message)``
instead of raising. The HTTP layer maps ``ErrorKind`` to a status code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PERSISTENCE: 500,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str
    details: Optional[List[Dict[str, Any]]] = field(default=None)

    @property
    def ok(self) -> bool:
        return False

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message, "kind": self.kind.value}
        if self.details:
            payload["details"] = self.details
        return payload


Result = Union[Ok[T], Err]

__all__ = ["ErrorKind", "STATUS_BY_KIND", "Ok", "Err", "Result"]
