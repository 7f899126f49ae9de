from collections.abc import Awaitable, Callable
from logging import Logger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

from app.configs.settings import DEFAULT_ERROR_MESSAGE
from app.utils.helpers import host
from app.utils.responses import error_response


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler producing an error envelope.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        detail = getattr(exc, "detail", DEFAULT_ERROR_MESSAGE)

        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        return error_response(message=detail, status_code=status_code)

    return handler


def create_http_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """Wrap Starlette/FastAPI `HTTPException` (unknown routes, 405, ...) in the envelope."""

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        http_exc = exc if isinstance(exc, StarletteHTTPException) else None
        status_code = http_exc.status_code if http_exc else HTTP_500_INTERNAL_SERVER_ERROR
        message = str(http_exc.detail) if http_exc else DEFAULT_ERROR_MESSAGE
        if status_code == HTTP_404_NOT_FOUND and message == "Not Found":
            message = f"Route {request.url.path} not found"

        logger.warning(f"{message} for ip: {host(request)} for endpoint {request.url.path}")

        response = error_response(message=message, status_code=status_code)
        if http_exc and http_exc.headers:
            response.headers.update(http_exc.headers)
        return response

    return handler


def create_unhandled_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """Catch-all handler: log the traceback, return a generic 500 envelope."""

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.error(
            f"Unhandled error for ip: {host(request)} for endpoint {request.url.path}",
            exc_info=exc,
        )
        return error_response(message=DEFAULT_ERROR_MESSAGE)

    return handler
