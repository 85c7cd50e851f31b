"""schemas/auth.py — Admin login request/response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    password: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool
    message: Optional[str] = None
