"""HTTP middleware: CORS, rate limiting, request logging and error envelopes."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from codevalley.config import Config
from codevalley.responses import error_response

_log = logging.getLogger(__name__)

_DEFAULT_MAX = 5
_DEFAULT_WINDOW = 60.0


def cors_middleware(config: Config) -> Middleware:
    """CORS settings allowing the configured comma-separated origins."""
    origins = [origin.strip() for origin in config.cors.origin.split(",") if origin.strip()]
    return Middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
        allow_credentials=True,
    )


class _Hit(NamedTuple):
    allowed: bool
    limit: int
    remaining: int
    reset_after: int


@dataclass
class _Window:
    hits: int
    reset_at: float


class FixedWindowLimiter:
    """Counts hits per key within fixed windows of ``window`` seconds.

    A non-positive ``max_requests`` means 5 and a non-positive ``window``
    means one minute.
    """

    def __init__(
        self,
        max_requests: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests if max_requests > 0 else _DEFAULT_MAX
        self.window = window if window > 0 else _DEFAULT_WINDOW
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> _Hit:
        """Record one request for ``key`` and tell whether it is allowed."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                self._windows = {k: w for k, w in self._windows.items() if now < w.reset_at}
                window = _Window(hits=0, reset_at=now + self.window)
                self._windows[key] = window
            window.hits += 1
            remaining = self.max_requests - window.hits
            reset_after = max(0, math.ceil(window.reset_at - now))
        return _Hit(remaining >= 0, self.max_requests, max(remaining, 0), reset_after)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects clients that exceed the limiter with 429 responses."""

    def __init__(self, app: ASGIApp, limiter: FixedWindowLimiter) -> None:
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next) -> Response:
        key = request.client.host if request.client else ""
        result = self.limiter.hit(key)
        if not result.allowed:
            return JSONResponse(
                error_response("Rate limit exceeded").to_dict(),
                status_code=429,
                headers={"Retry-After": str(result.reset_after)},
            )
        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(result.limit)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        response.headers["X-RateLimit-Reset"] = str(result.reset_after)
        return response


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._record(request, 500, start)
            raise
        self._record(request, response.status_code, start)
        return response

    @staticmethod
    def _record(request: Request, status: int, start: float) -> None:
        elapsed_ms = (time.perf_counter() - start) * 1000
        _log.info("%s %s - %d - %.3fms", request.method, request.url.path, status, elapsed_ms)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions raised downstream into JSON error envelopes."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except HTTPException as exc:
            _log.error("Error: %s", exc.detail)
            return JSONResponse(
                error_response(str(exc.detail)).to_dict(),
                status_code=exc.status_code,
                headers=exc.headers,
            )
        except Exception as exc:
            _log.error("Error: %s", exc)
            return JSONResponse(
                error_response("Internal server error").to_dict(), status_code=500
            )