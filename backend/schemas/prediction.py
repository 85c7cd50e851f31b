"""schemas/prediction.py — Prediction request/response schemas.

DB source: predictions — id, date, time, match, prediction, odds,
created_at, updated_at

The request model is deliberately permissive (every field optional) so the
route can answer a missing field with the service's own 400 message
instead of FastAPI's generic 422.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from db.models import PREDICTION_FIELDS


class PredictionCreate(BaseModel):
    # Odds are often typed as numbers by clients; store them as text
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    date: Optional[str] = None
    time: Optional[str] = None
    match: Optional[str] = None
    prediction: Optional[str] = None
    odds: Optional[str] = None

    def missing_fields(self) -> list[str]:
        """Names of fields that are absent, null, or the empty string."""
        return [name for name in PREDICTION_FIELDS if not getattr(self, name)]


class PredictionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: str
    time: str
    match: str
    prediction: str
    odds: str
    # ORM attribute name on the way in, camelCase on the wire
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: datetime = Field(
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )


class PredictionCreatedResponse(BaseModel):
    message: str
    prediction: PredictionResponse
