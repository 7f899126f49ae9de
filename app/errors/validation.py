"""Custom validation error handling for FastAPI."""

from collections.abc import Iterable, Sequence
from logging import getLogger
from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.status import HTTP_400_BAD_REQUEST

from app.configs import file_logger
from app.errors.base import BaseAppError
from app.schemas.responses import FieldError
from app.utils.helpers import host
from app.utils.responses import error_response

logger = file_logger(getLogger(__name__))

VALIDATION_MESSAGE = "Validation errors"


class ValidationError(BaseAppError):
    """Field-level validation failure carrying every violation found."""

    def __init__(
        self,
        detail: str = VALIDATION_MESSAGE,
        errors: list[FieldError] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Wrap a pydantic `ValidationError` raised while validating a document."""
        return cls(errors=format_errors(exc.errors(), skip_location=False))


def _field_message(error: dict[str, Any], field: str) -> str:
    ctx = error.get("ctx") or {}
    # custom validators raise ValueError; pydantic prefixes its msg with "Value error, "
    if isinstance(ctx.get("error"), Exception):
        return str(ctx["error"])
    if error.get("type") == "missing":
        return f"{field.split('.')[-1].capitalize()} is required"
    return str(error.get("msg", "Invalid value"))


def format_errors(
    errors: Iterable[dict[str, Any]],
    *,
    skip_location: bool = True,
) -> list[FieldError]:
    """
    Flatten pydantic error dicts into ``{field, message, type}`` entries.

    Args:
        errors: Output of ``exc.errors()``.
        skip_location: Drop the first ``loc`` item (``body``/``query``/``path``),
            as FastAPI prefixes request errors with their source.

    Returns:
        list[FieldError]: One entry per violation, in pydantic's order.
    """
    formatted: list[FieldError] = []
    for error in errors:
        loc: Sequence[Any] = error.get("loc", ())
        parts = loc[1:] if skip_location and len(loc) > 1 else loc
        field = ".".join(str(part) for part in parts) or "body"
        formatted.append(
            FieldError(
                field=field,
                message=_field_message(error, field),
                type=str(error.get("type", "value_error")),
            ),
        )
    return formatted


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle request and document validation errors with the envelope format.

    Args:
        request: The incoming request.
        exc: A `RequestValidationError` or an application `ValidationError`.

    Returns:
        ORJSONResponse with status 400 and the per-field errors.
    """
    if isinstance(exc, ValidationError):
        message, errors = exc.detail, exc.errors
    else:
        message = VALIDATION_MESSAGE
        errors = format_errors(cast(RequestValidationError, exc).errors())

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: "
        f"{[error.model_dump() for error in errors]}",
    )

    return error_response(message=message, status_code=HTTP_400_BAD_REQUEST, errors=errors)
