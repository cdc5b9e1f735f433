"""The web application and the command that serves it."""

from __future__ import annotations

import argparse
import logging

import uvicorn
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import Receive, Scope, Send
from starlette.websockets import WebSocketClose

from codevalley.config import Config, load
from codevalley.database import auto_migrate, initialize
from codevalley.middleware import (
    ErrorHandlerMiddleware,
    FixedWindowLimiter,
    RateLimitMiddleware,
    RequestLoggerMiddleware,
    cors_middleware,
)
from codevalley.responses import error_response

_log = logging.getLogger(__name__)

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}
_UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug", "trace"}


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        error_response(str(exc.detail)).to_dict(),
        status_code=exc.status_code,
        headers=exc.headers,
    )


async def _not_found(scope: Scope, receive: Receive, send: Send) -> None:
    if scope["type"] == "websocket":
        await WebSocketClose()(scope, receive, send)
        return
    request = Request(scope)
    message = f"Cannot {request.method} {request.url.path}"
    response = JSONResponse(error_response(message).to_dict(), status_code=404)
    await response(scope, receive, send)


def create_app(config: Config | None = None) -> Starlette:
    """Build the application with its global middleware."""
    config = config if config is not None else load()
    limiter = FixedWindowLimiter(config.rate_limit.max, config.rate_limit.expiration * 60)
    app = Starlette(
        routes=[],
        middleware=[
            Middleware(RequestLoggerMiddleware),
            cors_middleware(config),
            Middleware(RateLimitMiddleware, limiter=limiter),
            Middleware(ErrorHandlerMiddleware),
        ],
        exception_handlers={HTTPException: _http_error},
    )
    app.router.default = _not_found
    app.state.config = config
    return app


def main(argv: list[str] | None = None) -> int:
    """Load configuration, prepare the database and serve the API."""
    parser = argparse.ArgumentParser(prog="codevalley", description="Serve the Code Valley API.")
    parser.add_argument("--env-file", default=None, help="file of environment variables (default .env)")
    parser.add_argument("--database-url", default=None, help="database URL overriding the DB_* settings")
    args = parser.parse_args(argv)

    config = load(args.env_file)
    level_name = config.log_level.lower()
    logging.basicConfig(level=_LOG_LEVELS.get(level_name, logging.INFO))

    try:
        initialize(config, args.database_url)
    except RuntimeError as exc:
        _log.critical("Failed to initialize database: %s", exc)
        return 1
    try:
        auto_migrate()
    except RuntimeError as exc:
        _log.critical("Failed to run migrations: %s", exc)
        return 1

    app = create_app(config)
    _log.info("Server starting on port %s", config.port)
    try:
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=int(config.port),
            log_level=level_name if level_name in _UVICORN_LEVELS else "info",
        )
    except (OSError, ValueError) as exc:
        _log.critical("Failed to start server: %s", exc)
        return 1
    return 0