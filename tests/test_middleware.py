"""
Tests for HTTP middleware and the error body shape.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
import structlog
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from orgboard.core.middleware import REQUEST_ID_HEADER, SECURITY_HEADERS
from orgboard.main import create_app


@pytest.fixture
def limited_app(settings):
    return create_app(settings.model_copy(update={"rate_limit_enabled": True}))


@pytest.fixture
async def limited_client(limited_app):
    async with AsyncClient(transport=ASGITransport(app=limited_app), base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Security headers
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_security_headers_present(client):
    response = await client.get("/health")
    for header, value in SECURITY_HEADERS.items():
        assert response.headers[header] == value


@pytest.mark.asyncio
async def test_security_headers_on_errors(client):
    response = await client.get("/api/v1/users")
    assert response.status_code == 401
    assert response.headers["X-Frame-Options"] == "DENY"


# ---------------------------------------------------------------------------
# Request context
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_request_id_generated(client):
    response = await client.get("/health")
    request_id = response.headers[REQUEST_ID_HEADER]
    assert len(request_id) == 32
    int(request_id, 16)


@pytest.mark.asyncio
async def test_request_id_reused_from_caller(client):
    response = await client.get("/health", headers={REQUEST_ID_HEADER: "trace-abc"})
    assert response.headers[REQUEST_ID_HEADER] == "trace-abc"


@pytest.mark.asyncio
async def test_handlers_log_with_request_context(app, client):
    @app.get("/context")
    async def context():
        return dict(structlog.contextvars.get_contextvars())

    response = await client.get("/context")

    bound = response.json()
    assert bound["method"] == "GET"
    assert bound["path"] == "/context"
    assert bound["request_id"] == response.headers[REQUEST_ID_HEADER]


@pytest.mark.asyncio
async def test_request_context_replaced_per_request(app, client):
    @app.post("/context")
    async def context():
        return dict(structlog.contextvars.get_contextvars())

    first = await client.post("/context", headers={REQUEST_ID_HEADER: "first"})
    second = await client.post("/context")

    assert first.json()["request_id"] == "first"
    assert second.json()["request_id"] != "first"
    assert second.json()["method"] == "POST"


# ---------------------------------------------------------------------------
# Error body
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_error_body_shape(client):
    response = await client.get("/api/v1/users")
    body = response.json()
    assert set(body) == {"statusCode", "message", "timestamp", "path"}
    assert body["statusCode"] == 401
    assert body["path"] == "/api/v1/users"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_body(client):
    response = await client.get("/api/v1/nope")
    assert response.status_code == 404
    assert response.json()["statusCode"] == 404


@pytest.mark.asyncio
async def test_unhandled_error_is_500(app):
    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/boom")

    assert response.status_code == 500
    assert response.json()["message"] == "Internal server error"
    assert "kaboom" not in response.text


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_under_limit_passes_and_sets_expiry(limited_client):
    redis = AsyncMock()
    redis.incr.return_value = 1
    with patch("orgboard.core.middleware.get_redis", AsyncMock(return_value=redis)):
        response = await limited_client.get("/health")

    assert response.status_code == 200
    assert redis.incr.await_count == 2
    assert redis.expire.await_count == 2


@pytest.mark.asyncio
async def test_over_short_limit_is_429(limited_client):
    redis = AsyncMock()
    redis.incr.return_value = 11
    with patch("orgboard.core.middleware.get_redis", AsyncMock(return_value=redis)):
        response = await limited_client.get("/health")

    assert response.status_code == 429
    assert int(response.headers["Retry-After"]) >= 1
    assert response.json()["statusCode"] == 429


@pytest.mark.asyncio
async def test_over_long_limit_is_429(limited_client):
    redis = AsyncMock()
    redis.incr.side_effect = [5, 101]
    with patch("orgboard.core.middleware.get_redis", AsyncMock(return_value=redis)):
        response = await limited_client.get("/health")

    assert response.status_code == 429
    key = redis.incr.await_args_list[1].args[0]
    assert key.startswith("ratelimit:long:")


@pytest.mark.asyncio
async def test_redis_outage_lets_requests_through(limited_client):
    redis = AsyncMock()
    redis.incr.side_effect = RedisConnectionError("down")
    with patch("orgboard.core.middleware.get_redis", AsyncMock(return_value=redis)):
        response = await limited_client.get("/health")

    assert response.status_code == 200
