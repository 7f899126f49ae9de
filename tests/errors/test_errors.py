# tests/errors/test_errors.py
"""Tests for app/errors modules."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import Request
from httpx import ASGITransport, AsyncClient
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import (
    AutoReconnect,
    DuplicateKeyError,
    ExecutionTimeout,
    NetworkTimeout,
    OperationFailure,
    WaitQueueTimeoutError,
)

from app.errors import (
    BaseAppError,
    DatabaseError,
    DuplicateEntryError,
    OperationTimeoutError,
    RecordNotFoundError,
    StoreUnavailableError,
    ValidationError,
    format_errors,
    translate_store_errors,
)
from app.main import app
from app.models.blog import BlogDocument
from app.schemas import BlogCreate
from tests.fakes import FakeStore


class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (DatabaseError(), 500),
            (DuplicateEntryError(), 400),
            (RecordNotFoundError(), 404),
            (OperationTimeoutError(), 408),
            (StoreUnavailableError(), 503),
            (ValidationError(), 400),
        ],
    )
    def test_status_codes(self, error: BaseAppError, status_code: int) -> None:
        assert error.status_code == status_code

    def test_str_is_detail(self) -> None:
        assert str(RecordNotFoundError()) == "Blog post not found"

    def test_database_errors_share_base(self) -> None:
        for error_type in (DuplicateEntryError, RecordNotFoundError, OperationTimeoutError):
            assert issubclass(error_type, DatabaseError)


class TestTranslateStoreErrors:
    @pytest.mark.parametrize(
        ("raised", "expected"),
        [
            (DuplicateKeyError("E11000 duplicate key", 11000), DuplicateEntryError),
            (ExecutionTimeout("operation exceeded time limit", 50), OperationTimeoutError),
            (WaitQueueTimeoutError("pool exhausted"), OperationTimeoutError),
            (NetworkTimeout("socket timed out"), OperationTimeoutError),
            (AutoReconnect("connection reset"), StoreUnavailableError),
            (OperationFailure("bad query", 2), DatabaseError),
        ],
    )
    def test_mapping(self, raised: Exception, expected: type[DatabaseError]) -> None:
        with pytest.raises(expected) as exc_info, translate_store_errors("test"):
            raise raised
        assert type(exc_info.value) is expected
        assert exc_info.value.__cause__ is raised

    def test_generic_error_names_operation(self) -> None:
        with pytest.raises(DatabaseError) as exc_info, translate_store_errors("blog listing"):
            raise OperationFailure("bad query", 2)
        assert exc_info.value.detail.startswith("Error during blog listing")

    def test_non_driver_errors_pass_through(self) -> None:
        with pytest.raises(KeyError), translate_store_errors("test"):
            raise KeyError("x")


class TestFormatErrors:
    def test_request_location_dropped(self) -> None:
        errors = [{"loc": ("body", "title"), "msg": "Field required", "type": "missing"}]

        result = format_errors(errors)

        assert result[0].field == "title"
        assert result[0].message == "Title is required"
        assert result[0].type == "missing"

    def test_nested_location(self) -> None:
        errors = [{"loc": ("body", "tags", 0), "msg": "Input should be a valid string", "type": "string_type"}]

        assert format_errors(errors)[0].field == "tags.0"

    def test_body_level_error(self) -> None:
        errors = [{"loc": ("body",), "msg": "Field required", "type": "missing"}]

        assert format_errors(errors)[0].field == "body"

    def test_validator_message_unwrapped(self) -> None:
        with pytest.raises(PydanticValidationError) as exc_info:
            BlogCreate.model_validate({"title": "ab", "content": "Intro to AI and more."})

        result = format_errors(exc_info.value.errors(), skip_location=False)

        assert result[0].field == "title"
        assert result[0].message == "Title must be between 3 and 200 characters"

    def test_from_pydantic_keeps_field(self) -> None:
        with pytest.raises(PydanticValidationError) as exc_info:
            BlogDocument.model_validate({"title": "AI Basics", "content": "Intro to AI and more."})

        error = ValidationError.from_pydantic(exc_info.value)

        assert error.detail == "Validation errors"
        assert {e.field for e in error.errors} >= {"slug", "createdAt"}


@app.get("/__raise_unhandled")
async def _raise_unhandled(request: Request) -> None:
    raise RuntimeError("boom")


@pytest.fixture
async def lenient_client(store: FakeStore) -> AsyncGenerator[AsyncClient]:
    """Client that lets the catch-all handler respond instead of re-raising."""
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app, raise_app_exceptions=False),
    ) as ac:
        yield ac


class TestHandlers:
    async def test_unknown_route(self, client: AsyncClient) -> None:
        response = await client.get("/does-not-exist")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Route /does-not-exist not found"

    async def test_method_not_allowed(self, client: AsyncClient) -> None:
        response = await client.post("/blogs/stats")

        assert response.status_code == 405
        assert response.json()["success"] is False

    async def test_unhandled_error(self, lenient_client: AsyncClient) -> None:
        response = await lenient_client.get("/__raise_unhandled")

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["message"] == "Internal Server Error"
        assert "boom" not in response.text

    async def test_store_not_initialized(self) -> None:
        async with AsyncClient(base_url="http://test", transport=ASGITransport(app=app)) as ac:
            response = await ac.get("/blogs")

        assert response.status_code == 503
        assert response.json()["message"] == "Database connection error. Please try again later."

    async def test_database_error_envelope(
        self,
        client: AsyncClient,
        store: FakeStore,
    ) -> None:
        store.blogs.fail_with = OperationFailure("bad query", 2)

        response = await client.get("/blogs")

        assert response.status_code == 500
        assert response.json()["message"].startswith("Error during blog listing")
