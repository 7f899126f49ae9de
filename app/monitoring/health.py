"""
Liveness and readiness probes.

- ``/health/live``: the process answers; nothing external is touched.
- ``/health``: MongoDB answers a ``ping`` within ``HEALTH_CHECK_TIMEOUT`` seconds.
  Disk usage above 90% is reported as a warning.

Readiness payload
-----------------
{
    "status": "ready" | "not_ready",
    "timestamp": "2025-01-01T12:00:00.000Z",
    "version": "v1",
    "environment": "development",
    "checks": {
        "database": {"status": "pass", "response_ms": 3, "name": "blog_api"},
        "disk": {"status": "pass", "usage_percent": 41.2}
    }
}
"""

from asyncio import wait_for
from dataclasses import dataclass, field
from enum import StrEnum
from time import perf_counter
from typing import Any

from psutil import disk_usage
from pymongo.errors import PyMongoError

from app.configs import settings
from app.db.database import BlogStore
from app.utils.helpers import today_str

DISK_WARN_PERCENT = 90


class CheckStatus(StrEnum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class OverallStatus(StrEnum):
    READY = "ready"
    NOT_READY = "not_ready"
    LIVE = "live"


@dataclass
class ComponentCheck:
    """Outcome of one dependency probe; ``details`` are flattened into the payload."""

    status: CheckStatus
    response_ms: int | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": self.status.value}
        optional = {"response_ms": self.response_ms, "message": self.message}
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload | self.details


@dataclass
class HealthStatus:
    """Aggregated probe result returned by `HealthChecker`."""

    status: OverallStatus
    version: str
    checks: dict[str, ComponentCheck] = field(default_factory=dict)
    timestamp: str = field(default_factory=today_str)

    @property
    def is_healthy(self) -> bool:
        return self.status is not OverallStatus.NOT_READY

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "environment": settings.ENVIRONMENT,
            "checks": {name: check.to_dict() for name, check in self.checks.items()},
        }


def _since_ms(start: float) -> int:
    return int((perf_counter() - start) * 1000)


class HealthChecker:
    """
    Runs the liveness and readiness probes.

    Parameters
    ----------
    store : BlogStore | None
        Store to ping. ``None`` (lifespan never completed) fails readiness.
    version : str
        API version reported in the payload.
    timeout : float
        Seconds allowed for the ``ping`` round trip.

    Examples
    --------
    >>> status = await HealthChecker(store).check_readiness()
    >>> status.is_healthy
    True
    """

    def __init__(
        self,
        store: BlogStore | None = None,
        version: str = settings.API_VERSION,
        timeout: float = settings.HEALTH_CHECK_TIMEOUT,
    ) -> None:
        self.store = store
        self.version = version
        self.timeout = timeout

    def check_liveness(self) -> HealthStatus:
        return HealthStatus(status=OverallStatus.LIVE, version=self.version)

    async def check_readiness(self) -> HealthStatus:
        """Ready unless the store probe fails; the disk probe only ever warns."""
        checks = {"database": await self._probe_store(), "disk": self._probe_disk()}
        ready = all(check.status is not CheckStatus.FAIL for check in checks.values())
        return HealthStatus(
            status=OverallStatus.READY if ready else OverallStatus.NOT_READY,
            version=self.version,
            checks=checks,
        )

    async def _probe_store(self) -> ComponentCheck:
        if self.store is None:
            return ComponentCheck(CheckStatus.FAIL, message="Database not initialized")

        start = perf_counter()
        try:
            await wait_for(self.store.ping(), timeout=self.timeout)
        except TimeoutError:
            return ComponentCheck(
                CheckStatus.FAIL,
                response_ms=_since_ms(start),
                message="Database check timed out",
            )
        except PyMongoError as e:
            return ComponentCheck(
                CheckStatus.FAIL,
                response_ms=_since_ms(start),
                message=f"Database check failed: {e!s}",
            )
        return ComponentCheck(
            CheckStatus.PASS,
            response_ms=_since_ms(start),
            details={"name": self.store.config.MONGODB_DATABASE},
        )

    def _probe_disk(self) -> ComponentCheck:
        try:
            percent = disk_usage("/").percent
        except OSError as e:
            return ComponentCheck(CheckStatus.WARN, message=f"Could not check disk: {e!s}")

        status = CheckStatus.WARN if percent > DISK_WARN_PERCENT else CheckStatus.PASS
        return ComponentCheck(status, details={"usage_percent": percent})
