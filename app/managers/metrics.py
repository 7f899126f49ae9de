"""
In-process metrics for the blog endpoints.

Counts requests and failures per route label, keeps a bounded window of latencies
for averages and peaks, and counts requests rejected by the rate limiter. The
``/metrics`` endpoint combines this snapshot with host metrics from psutil.
"""

from asyncio import to_thread
from collections import defaultdict, deque
from dataclasses import dataclass, field
from logging import getLogger
from threading import Lock
from time import perf_counter
from types import TracebackType
from typing import Any, Self

from psutil import cpu_percent as get_cpu_percent
from psutil import disk_usage, virtual_memory

from app.configs import file_logger

logger = file_logger(getLogger(__name__))

_BYTES_PER_MB: int = 1024 * 1024
_LATENCY_WINDOW: int = 1000
_CPU_SAMPLE_INTERVAL: float = 0.1


@dataclass(slots=True)
class EndpointStats:
    """Counters and a sliding latency window for one route label."""

    requests: int = 0
    errors: int = 0
    latencies: deque[float] = field(default_factory=lambda: deque(maxlen=_LATENCY_WINDOW))
    _latency_sum: float = field(default=0.0, repr=False)

    def observe(self, duration: float, *, failed: bool) -> None:
        self.requests += 1
        if failed:
            self.errors += 1
        if len(self.latencies) == self.latencies.maxlen:
            self._latency_sum -= self.latencies[0]
        self.latencies.append(duration)
        self._latency_sum += duration

    @property
    def average(self) -> float:
        return self._latency_sum / len(self.latencies) if self.latencies else 0.0

    @property
    def peak(self) -> float:
        return max(self.latencies, default=0.0)


class MetricsManager:
    """
    Thread-safe collector for endpoint and rate-limit metrics.

    Examples
    --------
    >>> metrics = MetricsManager()
    >>> metrics.observe("/blogs", 0.012, failed=False)
    >>> metrics.get_metrics()["request_counts"]
    {'/blogs': 1}
    """

    __slots__ = ("_lock", "_endpoints", "_rate_limit_hits")

    def __init__(self) -> None:
        self._lock = Lock()
        self._endpoints: dict[str, EndpointStats] = defaultdict(EndpointStats)
        self._rate_limit_hits: int = 0

    def observe(self, endpoint: str, duration: float, *, failed: bool) -> None:
        """
        Record one handled request.

        Args:
            endpoint: Stable route label (e.g. ``/blogs/{id}``).
            duration: Handler time in seconds.
            failed: Whether the handler raised.
        """
        with self._lock:
            self._endpoints[endpoint].observe(duration, failed=failed)

    def record_rate_limit_hit(self) -> None:
        with self._lock:
            self._rate_limit_hits += 1

    def get_metrics(self) -> dict[str, Any]:
        """
        Snapshot all counters.

        Returns:
            Request and error counts, average and peak latency (seconds) per route
            label, and the number of rate-limited requests.
        """
        with self._lock:
            endpoints = dict(self._endpoints)
            return {
                "request_counts": {name: stats.requests for name, stats in endpoints.items()},
                "error_counts": {
                    name: stats.errors for name, stats in endpoints.items() if stats.errors
                },
                "avg_response_times": {name: stats.average for name, stats in endpoints.items()},
                "max_response_times": {name: stats.peak for name, stats in endpoints.items()},
                "rate_limit_hits": self._rate_limit_hits,
            }

    def reset_metrics(self) -> None:
        with self._lock:
            self._endpoints.clear()
            self._rate_limit_hits = 0
        logger.info("Metrics reset")


metrics_manager = MetricsManager()


class RequestTimer:
    """
    Async context manager timing one handler call.

    The outcome is recorded on exit; an exception escaping the block counts as a
    failure and is re-raised unchanged.
    """

    __slots__ = ("_endpoint", "_metrics", "_start", "duration")

    def __init__(self, endpoint: str, metrics: MetricsManager | None = None) -> None:
        self._endpoint = endpoint
        self._metrics = metrics or metrics_manager
        self._start: float = 0.0
        self.duration: float = 0.0

    async def __aenter__(self) -> Self:
        self._start = perf_counter()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        self.duration = perf_counter() - self._start
        self._metrics.observe(self._endpoint, self.duration, failed=exc_type is not None)


@dataclass(slots=True, frozen=True)
class SystemMetrics:
    """Host metrics snapshot."""

    cpu_percent: float
    memory_percent: float
    memory_used_mb: float
    memory_total_mb: float
    disk_percent: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "cpu_percent": self.cpu_percent,
            "memory": {
                "percent": self.memory_percent,
                "used_mb": self.memory_used_mb,
                "total_mb": self.memory_total_mb,
            },
            "disk_percent": self.disk_percent,
        }


def _sample_system() -> SystemMetrics:
    memory = virtual_memory()
    return SystemMetrics(
        cpu_percent=get_cpu_percent(interval=_CPU_SAMPLE_INTERVAL),
        memory_percent=memory.percent,
        memory_used_mb=round(memory.used / _BYTES_PER_MB, 2),
        memory_total_mb=round(memory.total / _BYTES_PER_MB, 2),
        disk_percent=disk_usage("/").percent,
    )


async def get_system_metrics() -> dict[str, Any]:
    """
    Sample host metrics in a worker thread (psutil calls block).

    Returns:
        CPU, memory and disk usage, or ``{"error": ...}`` when the host refuses.
    """
    try:
        return (await to_thread(_sample_system)).to_dict()
    except OSError as e:
        logger.exception("Failed to get system metrics: OS error")
        return {"error": f"Failed to collect system metrics: {e}"}
