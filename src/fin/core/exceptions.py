"""Ledger error types and the handler that renders them.

Services, repositories and the unit of work raise these; ``app_exception_handler``
is the only place they become HTTP responses.

    AppException                    500
        ValidationError             400  one field broke an input rule
        DependencyError             400  referenced category, currency or rate missing
        NotFoundError               404
        ConflictError               409  entity still referenced
        StorageError                500
            StorageTimeoutError     504  unit of work rolled back after its deadline
        ExternalAPIError            503  exchange rate source failed
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base ledger error.

    Subclasses set ``status_code``, a default ``detail`` and an ``error_code``;
    a message passed at raise time replaces the default detail.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"
    error_code: str | None = None

    def __init__(self, detail: str | None = None, *, error_code: str | None = None) -> None:
        cls = type(self)
        self.detail = detail or cls.detail
        self.error_code = error_code or cls.error_code
        super().__init__(self.detail)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.detail}
        if self.error_code:
            body["error_code"] = self.error_code
        return body


class ValidationError(AppException):
    """An input rule failed for ``field``.

    Validators evaluate in a fixed order and raise only the last failure, so
    exactly one field is reported.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Validation error"
    error_code = "VALIDATION_ERROR"

    def __init__(self, detail: str | None = None, *, field: str | None = None) -> None:
        super().__init__(detail)
        self.field = field

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        if self.field:
            body["field"] = self.field
        return body


class DependencyError(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Referenced resource not found"
    error_code = "DEPENDENCY_NOT_FOUND"


class NotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "not found"
    error_code = "NOT_FOUND"


class ConflictError(AppException):
    """Delete refused while other rows still point at the entity."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Resource conflict"
    error_code = "CONFLICT"


class StorageError(AppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Storage failure"
    error_code = "STORAGE_ERROR"


class StorageTimeoutError(StorageError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    detail = "Storage operation timed out"
    error_code = "STORAGE_TIMEOUT"


class ExternalAPIError(AppException):
    """Rate source unreachable, erroring, or returning an unreadable payload."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "External service unavailable"
    error_code = "EXTERNAL_API_ERROR"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render ``exc`` as ``{"detail", "error_code"[, "field"]}``.

    Server-side failures are logged with a traceback, client errors as warnings.
    """
    context = {
        "status_code": exc.status_code,
        "error_code": exc.error_code,
        "request_path": request.url.path,
    }
    message = f"{type(exc).__name__}: {exc.detail}"
    if exc.status_code >= 500:
        logger.error(message, exc_info=True, extra=context)
    else:
        logger.warning(message, extra=context)

    return JSONResponse(status_code=exc.status_code, content=exc.to_body())
