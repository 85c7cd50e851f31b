"""
main.py — Predictions API entry point

create_app() builds the FastAPI application from a frozen Settings object:
engine, session factory, middleware, exception handlers and routers. The
module-level `app` is built from the environment for uvicorn/gunicorn.

Usage
-----
Development (auto-reloads on file save):
    cd backend
    uvicorn api.main:app --reload --port 5000

Production (multiple worker processes):
    cd backend
    gunicorn api.main:app -c gunicorn.conf.py

Docs (once running):
    http://localhost:5000/docs    — Swagger UI (interactive)
    http://localhost:5000/redoc   — ReDoc (read-only)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routers.admin import router as admin_router
from api.routers.health import VERSION, router as health_router
from api.routers.predictions import router as predictions_router
from core.config import Settings, get_settings
from core.errors import ServiceError, StoreError
from core.logging import configure_logging
from core.middleware import RequestIDMiddleware, TimingMiddleware
from db.database import create_db_engine, create_session_factory, init_db

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan — startup and shutdown hooks
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    # ── Startup ────────────────────────────────────────────────────────────────
    configure_logging(settings.log_level, settings.log_file)
    init_db(app.state.engine)
    logger.info(
        "Predictions API starting",
        extra={
            "environment": settings.environment,
            "version": VERSION,
            "log_level": settings.log_level,
            "write_protection": settings.require_admin_for_writes,
        },
    )
    yield
    # ── Shutdown ───────────────────────────────────────────────────────────────
    app.state.engine.dispose()
    logger.info("Predictions API shutting down")


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render domain errors as ``{..., "message": ...}`` with their own status."""
    if isinstance(exc, StoreError):
        # The cause was logged by the store; this line ties it to the request
        logger.error(
            "request failed on store error",
            extra={"request_id": _request_id(request), "operation": exc.operation, "path": request.url.path},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies (bad JSON, wrong types) are a plain 400, not FastAPI's 422."""
    logger.debug(
        "malformed request body",
        extra={"request_id": _request_id(request), "path": request.url.path, "errors": str(exc.errors())},
    )
    return JSONResponse(status_code=400, content={"message": "Malformed request body"})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes, wrong methods and any HTTPException share the message shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: log the traceback, return clean JSON."""
    logger.error(
        "unhandled exception",
        extra={
            "request_id": _request_id(request),
            "method": request.method,
            "path": request.url.path,
            "error": str(exc),
        },
        exc_info=True,
    )
    return JSONResponse(status_code=500, content={"message": "Server error"})


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Predictions API",
        description="Stores and serves betting predictions behind a shared admin password.",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = create_db_engine(settings.database_url)
    app.state.session_factory = create_session_factory(app.state.engine)

    # Middleware (last added = outermost):
    #   request:  CORS → RequestID → Timing → route handler
    #   response: route handler → Timing → RequestID → CORS
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)          # /, /health, /health/db
    app.include_router(admin_router)           # /admin/login
    app.include_router(predictions_router)     # /predictions

    return app


app = create_app()
