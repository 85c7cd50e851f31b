"""core/middleware.py — Request-scoped ASGI middleware.

Provides:
  - RequestIDMiddleware  : reuses the caller's X-Request-ID or mints a UUID
  - TimingMiddleware     : logs method, path, status, and duration per request
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_REQUEST_ID_LEN = 128


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to every request and echo it on the response.

    A well-formed incoming X-Request-ID (from a proxy or the frontend) is kept
    so log lines correlate across hops; otherwise a fresh UUID4 is used.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        if incoming and len(incoming) <= _MAX_REQUEST_ID_LEN and incoming.isprintable():
            request_id = incoming
        else:
            request_id = uuid.uuid4().hex
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with its wall-clock duration.

    Must be added before RequestIDMiddleware so it runs innermost and can
    read request.state.request_id.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)

        logger.info(
            "request completed",
            extra={
                "request_id": getattr(request.state, "request_id", "-"),
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
