"""
dependencies.py — FastAPI dependency injection

Everything a route needs is pulled from request.app.state, populated once
by create_app(): the frozen Settings and the session factory. Nothing here
reads the environment at request time.

Usage in a route handler:
    from fastapi import Depends
    from api.dependencies import get_store
    from db.store import PredictionStore

    @router.get("/example")
    def example(store: PredictionStore = Depends(get_store)):
        return store.list_all()
"""

from typing import Generator, Optional

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from core.auth import ADMIN_PASSWORD_HEADER, passwords_match
from core.config import Settings
from core.errors import AuthenticationError
from db.store import PredictionStore

admin_password_header = APIKeyHeader(name=ADMIN_PASSWORD_HEADER, auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session, guaranteed to close after the request."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> PredictionStore:
    return PredictionStore(db)


def require_admin(
    password: Optional[str] = Security(admin_password_header),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Reject the request unless X-Admin-Password carries the shared secret.

    A no-op when settings.require_admin_for_writes is False.

    Raises:
        AuthenticationError: header missing or wrong (HTTP 401).
    """
    if not settings.require_admin_for_writes:
        return
    if not password:
        raise AuthenticationError("Admin password required")
    if not passwords_match(password, settings.admin_password):
        raise AuthenticationError("Invalid admin password")
