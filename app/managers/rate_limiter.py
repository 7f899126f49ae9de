# app/managers/rate_limiter.py

"""Rate limiter configuration using slowapi."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from app.configs import LimiterConfig, file_logger
from app.managers.metrics import metrics_manager
from app.utils.helpers import host
from app.utils.responses import error_response

logger = file_logger(getLogger(__name__))

# Per-route limits; callers presenting an X-API-Key get the higher tier.
READ_LIMIT = "60/minute"
READ_LIMIT_KEYED = "120/minute"
WRITE_LIMIT = "20/minute"
WRITE_LIMIT_KEYED = "60/minute"


def get_identifier(request: Request) -> str:
    """
    Get unique identifier for rate limiting.

    Uses API key from header if available, otherwise falls back to IP address.

    Args:
        request: FastAPI request object.

    Returns:
        Unique identifier string.
    """
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"apikey:{api_key}"

    remote_address = get_remote_address(request)
    return f"ip:{remote_address}"


def read_limit(key: str) -> str:
    """Limit for read endpoints, resolved per caller identifier."""
    return READ_LIMIT_KEYED if key.startswith("apikey:") else READ_LIMIT


def write_limit(key: str) -> str:
    """Limit for write endpoints, resolved per caller identifier."""
    return WRITE_LIMIT_KEYED if key.startswith("apikey:") else WRITE_LIMIT


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


async def close_limiter() -> None:
    """
    Reset limiter storage on shutdown.

    In-memory counters would otherwise survive an app restart inside the same process.
    """
    limiter.reset()
    logger.info("Rate limiter shutdown complete")


async def rate_limit_exceeded_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle rate limit exceeded exceptions.

    Args:
        request: FastAPI request object.
        exc: RateLimitExceeded exception.

    Returns:
        Error envelope with status 429 and a ``Retry-After`` header.
    """
    http_exc = cast(RateLimitExceeded, exc)
    retry_after = http_exc.limit.limit.get_expiry()
    metrics_manager.record_rate_limit_hit()

    logger.warning(
        f"Rate limit exceeded ({http_exc.detail}) for ip: {host(request)} "
        f"for endpoint {request.url.path}",
    )

    response = error_response(
        message=f"Rate limit exceeded: {http_exc.detail}. Retry after {retry_after} seconds",
        status_code=HTTP_429_TOO_MANY_REQUESTS,
    )
    response.headers["Retry-After"] = str(retry_after)
    return response
