"""schemas/shared.py — Reusable building blocks shared across schema modules."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str
