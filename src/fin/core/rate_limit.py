"""Rate limiting for endpoints that call the exchange rate source."""

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from fin.core.config import settings


def retry_after_seconds(exc: RateLimitExceeded) -> int:
    """Length in seconds of the window that was exhausted.

    Falls back to one minute when the limit carries no usable window.
    """
    limit = getattr(exc, "limit", None)
    item = getattr(limit, "limit", None)
    if item is None:
        return 60
    return item.multiples * item.GRANULARITY.seconds


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a 429 in the same shape as application errors.

    Response Format:
        {
            "detail": "rate limit exceeded: 10 per 1 minute",
            "error_code": "RATE_LIMITED",
            "retry_after": 60
        }
    """
    retry_after = retry_after_seconds(exc)
    response = JSONResponse(
        status_code=429,
        content={
            "detail": f"rate limit exceeded: {exc.detail}",
            "error_code": "RATE_LIMITED",
            "retry_after": retry_after,
        },
    )
    response.headers["Retry-After"] = str(retry_after)
    return response


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # Only the rate refresh endpoint is limited
    enabled=settings.RATE_LIMIT_ENABLED,
    headers_enabled=False,
)
