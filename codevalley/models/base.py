"""Declarative base and column types shared by the models."""

from __future__ import annotations

import enum
import json
import uuid
from datetime import date, datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase


def new_id() -> uuid.UUID:
    """Return a fresh random identifier."""
    return uuid.uuid4()


def _as_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, bytes):
        value = value.decode("ascii")
    return uuid.UUID(str(value))


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
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, (bytes, str)):
        return json.loads(value)
    return value


class GUID(sa.TypeDecorator):
    """UUID stored as its 36-character text form."""

    impl = sa.CHAR(36)
    cache_ok = True

    @property
    def python_type(self):
        return uuid.UUID

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(_as_uuid(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return _as_uuid(value)


class JSONMap(sa.TypeDecorator):
    """JSON object column; a NULL reads back as an empty dict."""

    impl = sa.JSON
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return _jsonable(dict(value))

    def process_result_value(self, value, dialect):
        value = _decode(value)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("expected a JSON object")
        return value


class JSONList(sa.TypeDecorator):
    """JSON array column; a NULL reads back as an empty list.

    With ``as_uuid`` the elements are read back as UUIDs.
    """

    impl = sa.JSON
    cache_ok = True

    def __init__(self, as_uuid: bool = False):
        super().__init__()
        self.as_uuid = as_uuid

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return [_jsonable(item) for item in value]

    def process_result_value(self, value, dialect):
        value = _decode(value)
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("expected a JSON array")
        if self.as_uuid:
            return [_as_uuid(item) for item in value]
        return value


class Base(DeclarativeBase):
    """Base of all models.

    Construction fills in column defaults at once, so a new object carries
    its identifier and default values before it is saved.
    """

    _serialize_exclude = frozenset()

    def __init__(self, **kwargs: Any) -> None:
        cls = type(self)
        for prop in sa.inspect(cls).column_attrs:
            if prop.key in kwargs:
                continue
            default = prop.columns[0].default
            if default is None:
                continue
            if getattr(default, "is_scalar", False):
                kwargs[prop.key] = default.arg
            elif getattr(default, "is_callable", False):
                kwargs[prop.key] = default.arg(None)
        for key, value in kwargs.items():
            if not hasattr(cls, key):
                raise TypeError(f"{key!r} is an invalid keyword argument for {cls.__name__}")
            setattr(self, key, value)

    def to_dict(self) -> dict[str, Any]:
        """Column values as JSON-ready data, keyed by attribute name."""
        return {
            prop.key: _jsonable(getattr(self, prop.key))
            for prop in sa.inspect(type(self)).column_attrs
            if prop.key not in self._serialize_exclude
        }