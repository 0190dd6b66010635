"""Logging middleware."""

import secrets
import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortener.common.headers import get_client_ip


REQUEST_ID_HEADER = "X-Request-ID"


def new_request_id() -> str:
    """Short random id that ties together the log lines of one request."""
    return secrets.token_urlsafe(6)[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging.

    Assigns every request an id (``request.state.request_id``) and returns it
    in the ``X-Request-ID`` response header.
    """

    def __init__(self, app, logger: logging.Logger = None):
        """Initialize logging middleware."""
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortener.middleware")

    async def dispatch(self, request: Request, call_next: Callable):
        """Log request and response."""
        start_time = time.time()
        request_id = new_request_id()
        request.state.request_id = request_id

        client_ip = get_client_ip(
            dict(request.headers),
            fallback=request.client.host if request.client else "unknown",
        )
        self.logger.info(f"[{request_id}] Request: {request.method} {request.url.path} from {client_ip}")

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        self.logger.info(
            f"[{request_id}] Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms"
        )

        return response
