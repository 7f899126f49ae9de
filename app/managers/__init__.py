from app.managers.metrics import MetricsManager, RequestTimer, get_system_metrics, metrics_manager
from app.managers.rate_limiter import (
    close_limiter,
    limiter,
    rate_limit_exceeded_handler,
    read_limit,
    write_limit,
)

__all__ = [
    "MetricsManager",
    "RequestTimer",
    "close_limiter",
    "get_system_metrics",
    "limiter",
    "metrics_manager",
    "rate_limit_exceeded_handler",
    "read_limit",
    "write_limit",
]
