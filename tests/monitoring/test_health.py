# tests/monitoring/test_health.py
"""Tests for app/monitoring/health.py module."""

from asyncio import sleep
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from app.monitoring import CheckStatus, ComponentCheck, HealthChecker, OverallStatus
from tests.fakes import FakeCollection, FakeStore


def _disk(percent: float) -> SimpleNamespace:
    return SimpleNamespace(percent=percent)


class TestComponentCheck:
    def test_to_dict_minimal(self) -> None:
        assert ComponentCheck(status=CheckStatus.PASS).to_dict() == {"status": "pass"}

    def test_to_dict_full(self) -> None:
        check = ComponentCheck(
            status=CheckStatus.WARN,
            response_ms=12,
            message="slow",
            details={"usage_percent": 91.0},
        )
        assert check.to_dict() == {
            "status": "warn",
            "response_ms": 12,
            "message": "slow",
            "usage_percent": 91.0,
        }


class TestHealthChecker:
    def test_liveness(self) -> None:
        status = HealthChecker().check_liveness()

        assert status.status == OverallStatus.LIVE
        assert status.is_healthy
        assert status.to_dict()["checks"] == {}

    async def test_ready(self) -> None:
        store = FakeStore(FakeCollection())
        with patch("app.monitoring.health.disk_usage", return_value=_disk(40.0)):
            status = await HealthChecker(store).check_readiness()

        assert status.status == OverallStatus.READY
        assert status.checks["database"].status == CheckStatus.PASS
        assert status.checks["disk"].details == {"usage_percent": 40.0}
        store.ping.assert_awaited_once()

    async def test_no_store(self) -> None:
        with patch("app.monitoring.health.disk_usage", return_value=_disk(40.0)):
            status = await HealthChecker(None).check_readiness()

        assert status.status == OverallStatus.NOT_READY
        assert status.checks["database"].message == "Database not initialized"

    async def test_ping_failure(self) -> None:
        store = FakeStore(FakeCollection())
        store.ping = AsyncMock(side_effect=ServerSelectionTimeoutError("No servers available"))
        with patch("app.monitoring.health.disk_usage", return_value=_disk(40.0)):
            status = await HealthChecker(store).check_readiness()

        assert not status.is_healthy
        assert status.checks["database"].status == CheckStatus.FAIL
        assert "No servers available" in (status.checks["database"].message or "")

    async def test_ping_timeout(self) -> None:
        async def slow_ping() -> None:
            await sleep(1)

        store = FakeStore(FakeCollection())
        store.ping = slow_ping  # type: ignore[method-assign]
        with patch("app.monitoring.health.disk_usage", return_value=_disk(40.0)):
            status = await HealthChecker(store, timeout=0.01).check_readiness()

        assert status.checks["database"].message == "Database check timed out"
        assert status.status == OverallStatus.NOT_READY

    @pytest.mark.parametrize(
        ("percent", "expected"),
        [(50.0, CheckStatus.PASS), (92.0, CheckStatus.WARN), (99.0, CheckStatus.WARN)],
    )
    async def test_disk_thresholds(self, percent: float, expected: CheckStatus) -> None:
        store = FakeStore(FakeCollection())
        with patch("app.monitoring.health.disk_usage", return_value=_disk(percent)):
            status = await HealthChecker(store).check_readiness()

        assert status.checks["disk"].status == expected
        assert status.is_healthy

    async def test_disk_error_is_warning(self) -> None:
        store = FakeStore(FakeCollection())
        with patch("app.monitoring.health.disk_usage", side_effect=OSError("no mount")):
            status = await HealthChecker(store).check_readiness()

        assert status.checks["disk"].status == CheckStatus.WARN
        assert status.is_healthy

    def test_to_dict_shape(self) -> None:
        payload = HealthChecker(version="v9").check_liveness().to_dict()

        assert set(payload) == {"status", "timestamp", "version", "environment", "checks"}
        assert payload["version"] == "v9"
        assert payload["environment"] == "test"
