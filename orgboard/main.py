"""
Orgboard API Server

Entry point for the FastAPI application. Run with ``orgboard`` or
``uvicorn orgboard.main:create_app --factory``.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from orgboard.api.v1 import router as api_v1_router
from orgboard.core.config import Settings
from orgboard.core.database import build_engine, build_session_factory
from orgboard.core.errors import register_exception_handlers
from orgboard.core.logging import configure_logging
from orgboard.core.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from orgboard.core.redis import close_redis

log = structlog.get_logger()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="Orgboard",
        description="Multi-tenant project management: organizations, projects, tasks and comments.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    register_exception_handlers(app)

    # Middleware (last added is outermost)
    if settings.rate_limit_enabled:
        app.add_middleware(RateLimitMiddleware, settings=settings)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Liveness probe."""
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/ready", tags=["System"])
    async def readiness_check(request: Request):
        """Readiness probe: the database must answer."""
        try:
            async with request.app.state.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            log.warning("ready.database_unavailable", error=str(exc))
            return JSONResponse(status_code=503, content={"status": "unavailable"})
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        log.info("Orgboard starting", environment=settings.environment)

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("Orgboard shutting down")
        await close_redis()
        await app.state.engine.dispose()

    return app


def run() -> None:
    """CLI entry point for the API server."""
    settings = Settings()
    configure_logging(settings.log_level, settings.log_format, settings.environment)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
