# app/middleware/middleware.py
"""
Middleware components for the blog API.

This module contains middleware for security headers, request logging with
request IDs and CORS handling, plus the lifespan event handler that owns the
document store connection.
"""

from asyncio import get_event_loop
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger
from re import compile as re_compile
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from rich.traceback import install
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from uvloop import Loop

from app.configs import file_logger, settings
from app.db import BlogStore
from app.managers.rate_limiter import close_limiter
from app.monitoring.logging import bind_request_id, clear_context, configure_logging
from app.utils.helpers import get_summary, host

logger = file_logger(getLogger(__name__))

install()

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_PATTERN = re_compile(r"[A-Za-z0-9._-]{1,128}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Manage application startup and shutdown with the document store lifecycle."""
    configure_logging()
    logger.info(f"Starting {app.title}...")

    store = BlogStore(settings)
    try:
        await store.connect()
        await store.ensure_indexes()
        app.state.store = store

        logger.info(f"is uvloop: {type(get_event_loop()) is Loop}")
        logger.info("Services initialized successfully")
        logger.info("Services:")
        logger.info("  - Backend API: http://localhost:8000")
        logger.info("  - API Documentation: http://localhost:8000/docs")
        logger.info("  - Health Check: http://localhost:8000/health")
        logger.info("  - Metrics: http://localhost:8000/metrics")

    except Exception:
        logger.exception("Failed to initialize services")
        store.close()
        raise

    yield

    logger.info(f"Shutting down {app.title}...")

    store.close()
    await close_limiter()
    logger.info("Services cleaned up successfully")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    if frontend_url := settings.PRODUCTION_FRONTEND_URL:
        allowed_origins.append(frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


def resolve_request_id(request: Request) -> str:
    """Reuse a well-formed incoming ``X-Request-ID``, otherwise mint a new one."""
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    return incoming if _REQUEST_ID_PATTERN.fullmatch(incoming) else uuid4().hex


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log one line per request and response; bind and echo the request ID."""
        request_id = resolve_request_id(request)
        bind_request_id(request_id)
        route = get_summary(request) or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route}, from ip: {host(request)} [{request_id}]")

        start = perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                f"Response: {response.status_code} for {request.method} {request.url.path} "
                f"in {(perf_counter() - start) * 1000:.1f}ms [{request_id}]",
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_context()


SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response
