"""SQLAlchemy models for the predictions service."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.types import TypeDecorator

from .database import Base


# The five free-form text fields a client supplies
PREDICTION_FIELDS = ("date", "time", "match", "prediction", "odds")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_prediction_id() -> str:
    """Opaque, unique identifier assigned by the store on insert."""
    return uuid.uuid4().hex


class UTCDateTime(TypeDecorator):
    """DateTime that always comes back timezone-aware in UTC.

    SQLite has no timezone storage and returns naive values; those are
    stored as UTC and re-tagged on the way out.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Prediction(Base):
    """A single betting tip: which match, what outcome, at what odds.

    All five text fields are free-form; the router guarantees they are
    non-empty before a row is ever constructed.
    """

    __tablename__ = "predictions"

    id = Column(String(32), primary_key=True, default=new_prediction_id)
    date = Column(Text, nullable=False)
    time = Column(Text, nullable=False)
    match = Column(Text, nullable=False)
    prediction = Column(Text, nullable=False)
    odds = Column(Text, nullable=False)

    # Timestamps — created_at is the listing sort key
    created_at = Column(UTCDateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(UTCDateTime(timezone=True), nullable=False, onupdate=utcnow)

    def __repr__(self):
        return f"<Prediction(id={self.id}, match='{self.match}', prediction='{self.prediction}')>"
