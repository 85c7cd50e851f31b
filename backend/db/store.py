"""db/store.py — Persistence for Prediction records.

PredictionStore wraps one request-scoped Session and exposes the three
operations the API needs. Any SQLAlchemyError is rolled back, logged with
its cause, and re-raised as core.errors.StoreError so routes never see
driver exceptions. "Not found" on delete is a normal outcome (None), not
an error.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import NoReturn

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import StoreError
from db.models import PREDICTION_FIELDS, Prediction, new_prediction_id, utcnow

logger = logging.getLogger(__name__)


class PredictionStore:
    def __init__(self, session: Session, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock

    def insert(self, fields: Mapping[str, str]) -> Prediction:
        """Persist a new Prediction built from the five text fields.

        Assigns id, created_at and updated_at. Keys other than the five
        prediction fields are ignored.
        """
        now = self.clock()
        record = Prediction(
            id=new_prediction_id(),
            created_at=now,
            updated_at=now,
            **{name: fields[name] for name in PREDICTION_FIELDS},
        )
        try:
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        except SQLAlchemyError as exc:
            self._fail("insert", exc)
        logger.info("prediction stored", extra={"prediction_id": record.id, "match": record.match})
        return record

    def list_all(self) -> list[Prediction]:
        """Every Prediction, newest first."""
        try:
            stmt = select(Prediction).order_by(Prediction.created_at.desc())
            return list(self.session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            self._fail("list", exc)

    def delete_by_id(self, prediction_id: str) -> Prediction | None:
        """Remove the Prediction with this id and return it, or None if absent."""
        try:
            record = self.session.get(Prediction, prediction_id)
            if record is None:
                return None
            self.session.delete(record)
            self.session.commit()
        except SQLAlchemyError as exc:
            self._fail("delete", exc)
        logger.info("prediction deleted", extra={"prediction_id": prediction_id})
        return record

    def _fail(self, operation: str, exc: SQLAlchemyError) -> NoReturn:
        try:
            self.session.rollback()
        except SQLAlchemyError:
            logger.warning("rollback after failed %s also failed", operation, exc_info=True)
        logger.error(
            "prediction store failure",
            extra={"operation": operation, "error": str(exc)},
            exc_info=exc,
        )
        raise StoreError(operation) from exc
