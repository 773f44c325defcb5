"""
Structured logging for Orgboard.

Every event carries the service name and deployment environment. Events
emitted while a request is in flight also carry that request's id,
method and path, bound by ``RequestLoggingMiddleware``.
"""

from __future__ import annotations

import logging
from typing import Optional

import structlog

SERVICE_NAME = "orgboard"


def _add_service(environment: Optional[str]):
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", SERVICE_NAME)
        if environment:
            event_dict.setdefault("environment", environment)
        return event_dict

    return processor


def configure_logging(
    level: str = "info", fmt: str = "json", environment: Optional[str] = None
) -> None:
    """Configure structlog. ``fmt`` is ``json`` for production, anything else renders for a console."""
    processors = [
        structlog.contextvars.merge_contextvars,
        _add_service(environment),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


def bind_request_context(request_id: str, method: str, path: str) -> None:
    """Replace the per-request log context."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)
