"""Application configuration read from the environment and an optional .env file."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import astuple, dataclass, field
from pathlib import Path

from dotenv import load_dotenv

_log = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DEFAULT_JWT_SECRET = "secret"

_DB_VARS = ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME")
_JWT_VARS = ("JWT_SECRET", "JWT_EXPIRE_HOURS")


@dataclass
class DatabaseConfig:
    """Connection settings for the MySQL database."""

    host: str = "localhost"
    port: str = "3306"
    user: str = "root"
    password: str = ""
    name: str = "code_valley"


@dataclass
class JWTConfig:
    """Settings for signing access tokens."""

    secret: str = _DEFAULT_JWT_SECRET
    expire_hours: int = 24


@dataclass
class CORSConfig:
    """Allowed cross-origin request origins."""

    origin: str = "*"


@dataclass
class RateLimitConfig:
    """Requests allowed per client within a window of minutes."""

    max: int = 100
    expiration: int = 1


@dataclass
class Config:
    """Complete server configuration."""

    port: str = "8000"
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    jwt: JWTConfig = field(default_factory=JWTConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    log_level: str = "info"


def _get_env(key: str, default: str) -> str:
    return os.environ.get(key, "") or default


def _atoi(text: str) -> int:
    """Parse a decimal integer strictly; anything unparsable yields 0."""
    if not _INTEGER.fullmatch(text):
        return 0
    number = int(text)
    if not _INT64_MIN <= number <= _INT64_MAX:
        return 0
    return number


def load(env_file: str | os.PathLike[str] | None = None) -> Config:
    """Build the configuration, loading ``env_file`` (default ``.env``) if present.

    Variables already set in the environment win over those in the file.
    """
    path = Path(env_file) if env_file is not None else Path(".env")
    if path.is_file():
        load_dotenv(path, override=False)
    else:
        _log.info("No .env file found, using environment variables")

    host, port, user, password, name = (
        _get_env(var, default) for var, default in zip(_DB_VARS, astuple(DatabaseConfig()))
    )
    secret, expire_hours = (
        _get_env(var, default)
        for var, default in zip(_JWT_VARS, (_DEFAULT_JWT_SECRET, "24"))
    )

    return Config(
        port=_get_env("PORT", "8000"),
        database=DatabaseConfig(
            host=host,
            port=port,
            user=user,
            password=password,
            name=name,
        ),
        jwt=JWTConfig(
            secret=secret,
            expire_hours=_atoi(expire_hours),
        ),
        cors=CORSConfig(origin=_get_env("CORS_ORIGIN", "*")),
        rate_limit=RateLimitConfig(
            max=_atoi(_get_env("RATE_LIMIT_MAX", "100")),
            expiration=_atoi(_get_env("RATE_LIMIT_EXPIRATION", "1")),
        ),
        log_level=_get_env("LOG_LEVEL", "info"),
    )