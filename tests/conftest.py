# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Must happen before any app module is imported: settings are read at import time
os.environ["LOG_TO_FILE"] = "false"
os.environ["ENVIRONMENT"] = "test"

from collections.abc import AsyncGenerator, Iterator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.main import app  # noqa: E402
from app.managers.metrics import metrics_manager  # noqa: E402
from app.managers.rate_limiter import limiter  # noqa: E402
from app.repositories import BlogRepository  # noqa: E402
from app.schemas import BlogCreate  # noqa: E402
from app.services import BlogStatisticsService  # noqa: E402
from tests.fakes import FakeCollection, FakeStore  # noqa: E402


@pytest.fixture
def collection() -> FakeCollection:
    """Empty in-memory blog collection."""
    return FakeCollection()


@pytest.fixture
def repo(collection: FakeCollection) -> BlogRepository:
    return BlogRepository(collection)  # type: ignore[arg-type]


@pytest.fixture
def stats_service(collection: FakeCollection) -> BlogStatisticsService:
    return BlogStatisticsService(collection)  # type: ignore[arg-type]


@pytest.fixture
def store(collection: FakeCollection) -> Iterator[FakeStore]:
    """Fake store installed on the app as the lifespan would do."""
    fake = FakeStore(collection)
    app.state.store = fake
    yield fake
    del app.state.store


@pytest.fixture
async def client(store: FakeStore) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client against the app with rate limiting disabled."""
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True
    metrics_manager.reset_metrics()


@pytest.fixture
def make_blog(repo: BlogRepository):
    """Factory creating posts through the repository."""

    async def _make(title: str = "Sample Post", **fields: object) -> dict:
        payload = {"content": "Some sample content for the post.", **fields, "title": title}
        return await repo.create(BlogCreate.model_validate(payload))

    return _make
