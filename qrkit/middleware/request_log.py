"""Request logging middleware — one log line per state-changing request."""


import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Methods that mutate state
_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

class RequestLogMiddleware(BaseHTTPMiddleware):
    """Logs `METHOD path → status (ms)` for write operations.

    Only the path is logged, never the query string: content URLs carry
    raw access tokens there.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000)

        if request.method in _WRITE_METHODS:
            logger.info(
                "%s %s → %s (%sms)",
                request.method, request.url.path, response.status_code, duration_ms,
            )

        return response
