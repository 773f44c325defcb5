"""
Health check and API root tests.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Health endpoint should return status ok with a timestamp."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_ready_check(client: AsyncClient):
    """Ready endpoint should reach the database."""
    response = await client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


@pytest.mark.asyncio
async def test_api_root(client: AsyncClient):
    """API v1 root should return version and endpoint list."""
    response = await client.get("/api/v1/")
    assert response.status_code == 200
    data = response.json()
    assert data["api"] == "v1"
    assert "/organizations" in data["endpoints"]


@pytest.mark.parametrize("fmt", ["json", "text"])
def test_configure_logging(fmt, capsys):
    """Both renderers should emit the event name."""
    import structlog

    from orgboard.core.logging import configure_logging

    configure_logging("info", fmt)
    try:
        structlog.get_logger().info("boot.event", answer=42)
        assert "boot.event" in capsys.readouterr().out
    finally:
        structlog.reset_defaults()


def test_configure_logging_filters_below_level(capsys):
    import structlog

    from orgboard.core.logging import configure_logging

    configure_logging("warning", "json")
    try:
        structlog.get_logger().info("quiet.event")
        assert "quiet.event" not in capsys.readouterr().out
    finally:
        structlog.reset_defaults()


def test_json_logs_carry_service_and_request_context(capsys):
    import json

    import structlog

    from orgboard.core.logging import bind_request_context, configure_logging

    configure_logging("info", "json", environment="test")
    try:
        bind_request_context("req-1", "DELETE", "/api/v1/tasks/1")
        structlog.get_logger().info("task.deleted")
        line = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    finally:
        structlog.contextvars.clear_contextvars()
        structlog.reset_defaults()

    assert line["event"] == "task.deleted"
    assert line["service"] == "orgboard"
    assert line["environment"] == "test"
    assert line["request_id"] == "req-1"
    assert line["method"] == "DELETE"
    assert line["path"] == "/api/v1/tasks/1"
