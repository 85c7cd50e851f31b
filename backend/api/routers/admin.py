"""api/routers/admin.py — Admin login.

Routes:
    POST /admin/login     One-shot check of the shared admin password

A wrong password is a normal 200 response with success=false; only a
missing password is a client error. The body is read by hand so that
every response, malformed input included, carries the `success` flag.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_app_settings
from core.auth import passwords_match
from core.config import Settings
from core.errors import ValidationError
from schemas.auth import LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


async def _read_password(request: Request):
    """The `password` member of a JSON object body, or None if there is none."""
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    return body.get("password")


@router.post(
    "/login",
    response_model=LoginResponse,
    response_model_exclude_none=True,
    summary="Check admin password",
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": LoginRequest.model_json_schema()}},
        },
    },
)
async def login(request: Request, settings: Settings = Depends(get_app_settings)):
    password = await _read_password(request)
    if password is None or password == "":
        raise ValidationError("Password required", success=False)

    # Non-string passwords (numbers, lists) can never equal the secret
    if not isinstance(password, str) or not passwords_match(password, settings.admin_password):
        logger.warning(
            "admin login rejected",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "client": request.client.host if request.client else None,
            },
        )
        return LoginResponse(success=False, message="Incorrect password")

    logger.info("admin login accepted", extra={"request_id": getattr(request.state, "request_id", None)})
    return LoginResponse(success=True, message="Login successful")
