"""Database engine and session factory construction."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Build an engine for the configured DATABASE_URL.

    SQLAlchemy requires "postgresql://" not "postgres://" (the form most
    hosting providers hand out). SQLite is accepted for local development
    and tests; an in-memory SQLite database is pinned to one connection so
    every session in the process sees the same data.
    """
    if not database_url:
        raise ValueError("DATABASE_URL is not configured")

    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using them
        pool_size=10,        # Number of connections to maintain
        max_overflow=20,     # Maximum overflow connections
        connect_args={"connect_timeout": 10},
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create any missing tables. There are no migrations; the schema is one table.

    Several processes may race here on a fresh database (one uvicorn worker
    per process); losing the race on CREATE TABLE is fine as long as the
    tables exist afterwards.
    """
    # Register models on Base.metadata before create_all
    from . import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except (IntegrityError, ProgrammingError, OperationalError) as exc:
        existing = set(inspect(engine).get_table_names())
        if not set(Base.metadata.tables) <= existing:
            raise
        logger.info("tables created concurrently by another process", extra={"error": str(exc)})
    logger.info("database tables ensured", extra={"tables": sorted(Base.metadata.tables)})


def ensure_schema(database_url: str) -> None:
    """Create the tables once with a short-lived engine (gunicorn master, before forking)."""
    engine = create_db_engine(database_url)
    try:
        init_db(engine)
    finally:
        engine.dispose()


def check_db_connectivity(session_factory: sessionmaker) -> bool:
    """Execute SELECT 1 to verify the database is reachable.

    Returns:
        True if the database responds.

    Raises:
        RuntimeError: with a descriptive message if the connection fails.
    """
    db = session_factory()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        raise RuntimeError(f"Database connectivity check failed: {exc}") from exc
    finally:
        db.close()
