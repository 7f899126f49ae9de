# tests/managers/test_rate_limiter.py
"""Tests for app/managers/rate_limiter.py module."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from app.main import app
from app.managers import limiter, metrics_manager, read_limit, write_limit
from app.managers.rate_limiter import get_identifier
from tests.fakes import FakeStore


@pytest.fixture
async def limited_client(store: FakeStore) -> AsyncGenerator[AsyncClient]:
    """Client with rate limiting enabled and fresh counters."""
    limiter.enabled = True
    limiter.reset()
    async with AsyncClient(base_url="http://test", transport=ASGITransport(app=app)) as ac:
        yield ac
    limiter.reset()
    metrics_manager.reset_metrics()


class TestLimits:
    def test_read_limits(self) -> None:
        assert read_limit("ip:127.0.0.1") == "60/minute"
        assert read_limit("apikey:abc") == "120/minute"

    def test_write_limits(self) -> None:
        assert write_limit("ip:127.0.0.1") == "20/minute"
        assert write_limit("apikey:abc") == "60/minute"


class TestIdentifier:
    def _request(self, headers: dict[str, str]) -> Request:
        scope = {
            "type": "http",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
            "client": ("10.0.0.1", 1234),
        }
        return Request(scope)

    def test_ip(self) -> None:
        assert get_identifier(self._request({})) == "ip:10.0.0.1"

    def test_api_key(self) -> None:
        request = self._request({"X-API-Key": "k1"})
        assert get_identifier(request) == "apikey:k1"


class TestRateLimitExceeded:
    async def test_429_envelope(self, limited_client: AsyncClient) -> None:
        with patch("app.main.get_system_metrics", AsyncMock(return_value={})):
            statuses = [(await limited_client.get("/metrics")).status_code for _ in range(5)]
            response = await limited_client.get("/metrics")

        assert statuses == [200] * 5
        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["message"].startswith("Rate limit exceeded: 5 per 1 minute")
        assert response.headers["Retry-After"] == "60"
        assert metrics_manager.get_metrics()["rate_limit_hits"] == 1

    async def test_write_limit(self, limited_client: AsyncClient) -> None:
        payload = {"content": "Some sample content for the post."}
        statuses = [
            (await limited_client.post("/blogs", json={**payload, "title": f"Post {i}"})).status_code
            for i in range(21)
        ]

        assert statuses[:20] == [201] * 20
        assert statuses[20] == 429

    async def test_api_key_gets_higher_tier(self, limited_client: AsyncClient) -> None:
        payload = {"content": "Some sample content for the post."}
        statuses = [
            (
                await limited_client.post(
                    "/blogs",
                    json={**payload, "title": f"Post {i}"},
                    headers={"X-API-Key": "partner"},
                )
            ).status_code
            for i in range(21)
        ]

        assert statuses == [201] * 21

    async def test_health_exempt(self, limited_client: AsyncClient) -> None:
        statuses = {(await limited_client.get("/health/live")).status_code for _ in range(70)}

        assert statuses == {200}
