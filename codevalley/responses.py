"""Uniform JSON envelopes returned by the API."""

from __future__ import annotations

import dataclasses
import enum
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any


def _jsonable(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _jsonable(to_dict())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    return value


@dataclass
class APIResponse:
    """Envelope with a success flag, a message and optional data."""

    success: bool
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "data": _jsonable(self.data),
        }


@dataclass
class PaginationMeta:
    """Paging information for a list result."""

    current_page: int = 0
    per_page: int = 0
    total: int = 0
    total_pages: int = 0


@dataclass
class PaginatedResponse:
    """One page of results with its paging information."""

    data: list[Any] = field(default_factory=list)
    meta: PaginationMeta = field(default_factory=PaginationMeta)

    def to_dict(self) -> dict[str, Any]:
        return {"data": _jsonable(list(self.data)), "meta": _jsonable(self.meta)}


def success_response(message: str, data: Any = None) -> APIResponse:
    """Build a successful envelope."""
    return APIResponse(success=True, message=message, data=data)


def error_response(message: str) -> APIResponse:
    """Build a failure envelope without data."""
    return APIResponse(success=False, message=message, data=None)