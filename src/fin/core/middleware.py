"""Request/response logging middleware."""

import logging
import time
from collections.abc import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

QUIET_PATHS = frozenset({"/health", "/health/db", "/docs", "/openapi.json", "/redoc"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every ledger request with its status and duration.

    Adds an ``X-Process-Time`` header (seconds, 3 decimals) to every
    response. Health probes and API docs are passed through without logging.
    Client errors are logged at WARNING, server errors at ERROR.
    """

    def __init__(self, app: ASGIApp, quiet_paths: frozenset[str] = QUIET_PATHS) -> None:
        super().__init__(app)
        self._quiet_paths = quiet_paths

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{duration:.3f}"

        if request.url.path in self._quiet_paths:
            return response

        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        client_host = request.client.host if request.client else "unknown"

        if response.status_code >= 500:
            log_level = logging.ERROR
        elif response.status_code >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            f"{request.method} {target} from {client_host} - "
            f"{response.status_code} ({duration:.3f}s)",
        )
        return response
