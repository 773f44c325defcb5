"""
HTTP middleware: security headers, request logging, rate limiting.
"""

from __future__ import annotations

import math
import time
import uuid

import structlog
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from orgboard.core.config import Settings
from orgboard.core.errors import error_body
from orgboard.core.logging import bind_request_context
from orgboard.core.redis import get_redis

log = structlog.get_logger()

# ---------------------------------------------------------------------------
# Security Headers
# ---------------------------------------------------------------------------

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none';",
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains",
}

# Interactive docs need scripts and styles from the CDN.
DOCS_PATHS = ("/docs", "/redoc")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach security headers to every response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            if header == "Content-Security-Policy" and request.url.path.startswith(DOCS_PATHS):
                continue
            response.headers[header] = value
        return response


# ---------------------------------------------------------------------------
# Request logging
# ---------------------------------------------------------------------------

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Bind a request id, method and path to the log context, then emit one
    ``http.request`` event with the status and duration.

    A caller-supplied ``X-Request-ID`` is reused; the id is echoed back on
    the response.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        bind_request_context(request_id, request.method, request.url.path)

        started = time.perf_counter()
        response = await call_next(request)
        log.info(
            "http.request",
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ---------------------------------------------------------------------------
# Rate limiting (fixed windows in Redis)
# ---------------------------------------------------------------------------


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-client fixed-window rate limiting.

    Each window keeps a counter under ``ratelimit:{name}:{client}:{window}``;
    the first hit in a window sets its expiry. A request over any window's
    limit gets 429. If Redis is unreachable requests are let through.
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.redis_url = settings.redis_url
        self.windows = [
            ("short", settings.rate_limit_short_ttl, settings.rate_limit_short_limit),
            ("long", settings.rate_limit_long_ttl, settings.rate_limit_long_limit),
        ]

    async def dispatch(self, request: Request, call_next) -> Response:
        client = request.client.host if request.client else "unknown"
        now = time.time()

        try:
            redis = await get_redis(self.redis_url)
            for name, ttl, limit in self.windows:
                window = int(now // ttl)
                key = f"ratelimit:{name}:{client}:{window}"
                count = await redis.incr(key)
                if count == 1:
                    await redis.expire(key, ttl)
                if count > limit:
                    retry_after = max(1, math.ceil((window + 1) * ttl - now))
                    log.info("ratelimit.exceeded", client=client, window=name, count=count)
                    return JSONResponse(
                        status_code=429,
                        content=error_body(429, "Too many requests", request.url.path),
                        headers={"Retry-After": str(retry_after)},
                    )
        except (RedisError, OSError) as exc:
            log.warning("ratelimit.unavailable", error=str(exc))

        return await call_next(request)
