"""core/errors.py — Domain error taxonomy.

Every error a route can surface to a client derives from ServiceError and
carries its own HTTP status. api/main.py registers one exception handler
that renders them as ``{**extra, "message": message}``.

    ValidationError      400  client omitted required fields / malformed body
    AuthenticationError  401  missing or wrong admin credential on a write
    NotFoundError        404  delete target does not exist
    StoreError           500  persistence layer failed; cause is logged only

A wrong password on POST /admin/login is not an error: it is a normal
``{"success": false}`` response.
"""

from __future__ import annotations

from typing import Any


class ServiceError(Exception):
    status_code: int = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_content(self) -> dict[str, Any]:
        return {**self.extra, "message": self.message}


class ValidationError(ServiceError):
    status_code = 400


class AuthenticationError(ServiceError):
    status_code = 401


class NotFoundError(ServiceError):
    status_code = 404


class StoreError(ServiceError):
    """Persistence failure. The client only ever sees the generic message."""

    status_code = 500

    def __init__(self, operation: str) -> None:
        super().__init__("Server error")
        self.operation = operation
