"""api/routers/health.py — Health check endpoints.

Routes:
    GET /              Static banner — confirms the process is serving
    GET /health        Liveness check — returns env, version, timestamp
    GET /health/db     Readiness check — verifies DB is reachable
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from api.dependencies import get_app_settings
from core.config import Settings
from db.database import check_db_connectivity

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

VERSION = "1.0.0"
BANNER = "Predictions API is running"


@router.get("/", response_class=PlainTextResponse, summary="API root")
def root():
    return BANNER


@router.get("/health", summary="Liveness check")
def health(settings: Settings = Depends(get_app_settings)):
    """Returns environment, version, and current UTC timestamp."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/db", summary="Readiness check")
def health_db(request: Request):
    """Returns HTTP 200 when the database answers SELECT 1, HTTP 503 when not.

    The failure reason is logged, not returned, so connection strings never
    reach the client.
    """
    try:
        check_db_connectivity(request.app.state.session_factory)
    except RuntimeError as exc:
        logger.warning("health/db: database unreachable — %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": "unreachable"},
        )
    logger.debug("health/db: database reachable")
    return {"status": "ok", "db": "connected"}
