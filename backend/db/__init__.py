"""Database package for the predictions service."""

from .database import (
    Base,
    check_db_connectivity,
    create_db_engine,
    create_session_factory,
    ensure_schema,
    init_db,
)
from .models import Prediction
from .store import PredictionStore

__all__ = [
    "Base",
    "check_db_connectivity",
    "create_db_engine",
    "create_session_factory",
    "ensure_schema",
    "init_db",
    "Prediction",
    "PredictionStore",
]
