from collections.abc import Awaitable, Callable
from functools import wraps
from logging import getLogger
from typing import ParamSpec, TypeVar

from app.configs import file_logger, settings
from app.managers.metrics import MetricsManager, RequestTimer

logger = file_logger(getLogger(__name__))

P = ParamSpec("P")
R = TypeVar("R")


def timed(
    endpoint: str,
    metrics: MetricsManager | None = None,
    slow_ms: int | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Record latency and outcome of a route handler under a fixed label.

    Labels are fixed strings (``/blogs/{id}``, ``/blogs/like``) so metrics do not
    grow with every id or slug requested. Handlers slower than ``slow_ms`` (default
    ``SLOW_REQUEST_MS``) are logged.

    Args:
        endpoint: Route label.
        metrics: Metrics manager (defaults to the global instance).
        slow_ms: Slow-request threshold in milliseconds.

    Example:
        @timed("/blogs/{id}")
        async def get_blog(request: Request, blog_id: str) -> ORJSONResponse:
            ...
    """
    threshold = settings.SLOW_REQUEST_MS if slow_ms is None else slow_ms

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            timer = RequestTimer(endpoint, metrics)
            async with timer:
                result = await func(*args, **kwargs)
            if timer.duration * 1000 > threshold:
                logger.warning(f"Slow request on {endpoint}: {timer.duration * 1000:.0f}ms")
            return result

        return wrapper

    return decorator
