"""
predictions.py — Betting tip endpoints

Routes:
    GET    /predictions          All predictions, newest first
    POST   /predictions          Add a prediction (admin)
    DELETE /predictions/{id}     Remove a prediction (admin)

The write routes depend on require_admin, which is a no-op unless
REQUIRE_ADMIN_FOR_WRITES is set (the default).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_store, require_admin
from core.errors import NotFoundError, ValidationError
from db.store import PredictionStore
from schemas.prediction import PredictionCreate, PredictionCreatedResponse, PredictionResponse
from schemas.shared import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/predictions", tags=["predictions"])


@router.get("", response_model=list[PredictionResponse], summary="List predictions")
def list_predictions(store: PredictionStore = Depends(get_store)):
    return store.list_all()


@router.post(
    "",
    response_model=PredictionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
    summary="Add prediction",
)
def create_prediction(
    payload: PredictionCreate | None = None,
    store: PredictionStore = Depends(get_store),
):
    if payload is None or payload.missing_fields():
        logger.debug(
            "prediction rejected",
            extra={"missing": payload.missing_fields() if payload else "all"},
        )
        raise ValidationError("All fields are required")

    record = store.insert(payload.model_dump())
    return PredictionCreatedResponse(
        message="Prediction added",
        prediction=PredictionResponse.model_validate(record),
    )


@router.delete(
    "/{prediction_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
    summary="Delete prediction",
)
def delete_prediction(prediction_id: str, store: PredictionStore = Depends(get_store)):
    if store.delete_by_id(prediction_id) is None:
        raise NotFoundError("Prediction not found")
    return MessageResponse(message="Prediction deleted")
