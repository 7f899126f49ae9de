"""Builders for the uniform JSON response envelope."""

from collections.abc import Sequence
from typing import Any

from fastapi.responses import ORJSONResponse
from pydantic import BaseModel
from starlette.status import HTTP_200_OK, HTTP_500_INTERNAL_SERVER_ERROR

from app.schemas.responses import FieldError, Pagination
from app.utils.helpers import today_str

type Payload = BaseModel | Sequence[BaseModel] | dict[str, Any] | None


def _dump(data: Payload) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, dict) or data is None:
        return data
    return [item.model_dump(mode="json", by_alias=True) for item in data]


def success_response(
    data: Payload = None,
    message: str = "Success",
    status_code: int = HTTP_200_OK,
) -> ORJSONResponse:
    """
    Wrap data in a success envelope.

    Args:
        data: Model, list of models or plain dict to return.
        message: Human-readable message.
        status_code: HTTP status code.

    Returns:
        ORJSONResponse with ``{success, message, data, timestamp}``.
    """
    content = {
        "success": True,
        "message": message,
        "data": _dump(data),
        "timestamp": today_str(),
    }
    return ORJSONResponse(content=content, status_code=status_code)


def paginated_response(
    data: Sequence[BaseModel],
    pagination: Pagination,
    message: str = "Success",
    status_code: int = HTTP_200_OK,
) -> ORJSONResponse:
    """Wrap a page of results with pagination metadata."""
    content = {
        "success": True,
        "message": message,
        "data": _dump(data),
        "pagination": pagination.model_dump(),
        "timestamp": today_str(),
    }
    return ORJSONResponse(content=content, status_code=status_code)


def error_response(
    message: str = "Error",
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    errors: Sequence[FieldError] | None = None,
) -> ORJSONResponse:
    """
    Build an error envelope.

    Args:
        message: Error message shown to the client.
        status_code: HTTP status code.
        errors: Optional field-level violations.

    Returns:
        ORJSONResponse with ``{success: false, message, errors?, timestamp}``.
    """
    content: dict[str, Any] = {
        "success": False,
        "message": message,
        "timestamp": today_str(),
    }
    if errors:
        content["errors"] = [error.model_dump() for error in errors]
    return ORJSONResponse(content=content, status_code=status_code)
