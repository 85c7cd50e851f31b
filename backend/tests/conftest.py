"""
conftest.py for backend/tests/

Every test gets its own application built by create_app() over a private
in-memory SQLite database, so no environment variables or running database
are needed.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from core.config import Settings
from core.logging import reset_logging

ADMIN_PASSWORD = "s3cret-tipster"


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging() (run by every app lifespan) after each test.

    pytest's capture handlers are never touched by configure_logging, so
    only the installed handlers and the root level need putting back.
    """
    root = logging.getLogger()
    saved_level = root.level
    yield root
    reset_logging()
    root.setLevel(saved_level)


@pytest.fixture()
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        admin_password=ADMIN_PASSWORD,
        environment="test",
        log_level="WARNING",
        log_file="",
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    # Context manager runs the lifespan, which creates the tables
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin_headers():
    return {"X-Admin-Password": ADMIN_PASSWORD}


@pytest.fixture()
def sample_payload():
    return {
        "date": "2024-05-01",
        "time": "18:00",
        "match": "A vs B",
        "prediction": "Home Win",
        "odds": "1.85",
    }


@pytest.fixture()
def ticking_clock():
    """A clock that advances one minute per call, starting 2024-05-01 12:00 UTC."""
    start = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    calls = {"n": 0}

    def clock():
        now = start + timedelta(minutes=calls["n"])
        calls["n"] += 1
        return now

    return clock
