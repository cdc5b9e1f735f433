"""Database engine setup, schema creation and session handling."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from codevalley.config import Config
from codevalley.models import (  # noqa: F401  (registers every table)
    economy,
    npc,
    progression,
    quest,
    social,
    user,
    world,
)
from codevalley.models.base import Base

_log = logging.getLogger(__name__)


@dataclass
class _State:
    engine: Engine | None = None
    sessions: sessionmaker | None = None


_state = _State()


def build_database_url(config: Config) -> URL:
    """Return the MySQL connection URL described by ``config``."""
    db = config.database
    return URL.create(
        "mysql+pymysql",
        username=db.user,
        password=db.password,
        host=db.host,
        port=int(db.port),
        database=db.name,
        query={"charset": "utf8mb4"},
    )


def initialize(config: Config, url: str | URL | None = None) -> Engine:
    """Connect to the database and check that it answers.

    ``url`` overrides the MySQL URL built from ``config``.
    Raises RuntimeError when the database cannot be reached.
    """
    target = make_url(url) if url is not None else build_database_url(config)
    options: dict = {"echo": config.log_level.lower() == "debug"}
    if target.get_backend_name() != "sqlite":
        options.update(pool_size=10, max_overflow=90, pool_recycle=3600)

    try:
        engine = sa.create_engine(target, **options)
    except (SQLAlchemyError, ImportError, ValueError) as exc:
        raise RuntimeError(f"failed to connect to database: {exc}") from exc

    if _state.engine is not None:
        _state.engine.dispose()
    _state.engine = engine
    _state.sessions = sessionmaker(bind=engine, expire_on_commit=False)

    try:
        with engine.connect() as connection:
            connection.execute(sa.text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise RuntimeError(f"failed to ping database: {exc}") from exc

    _log.info("Database connected successfully")
    return engine


def _require_engine() -> Engine:
    if _state.engine is None:
        raise RuntimeError("database is not initialized")
    return _state.engine


def auto_migrate() -> None:
    """Create every table that does not exist yet."""
    engine = _require_engine()
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise RuntimeError(f"failed to auto-migrate database: {exc}") from exc
    _log.info("Database migration completed successfully")


def get_engine() -> Engine | None:
    """Return the current engine, or None before initialization."""
    return _state.engine


@contextmanager
def session_scope() -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error."""
    _require_engine()
    session = _state.sessions()
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()