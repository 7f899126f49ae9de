# app/main.py

"""Blog Content API - blog posts over MongoDB with FastAPI."""

from logging import getLogger

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.configs import file_logger, settings
from app.dependencies import StoreDep
from app.errors import (
    BaseAppError,
    DatabaseError,
    ValidationError,
    create_exception_handler,
    create_http_exception_handler,
    create_unhandled_exception_handler,
    database_exception_handler,
    validation_exception_handler,
)
from app.managers import (
    get_system_metrics,
    limiter,
    metrics_manager,
    rate_limit_exceeded_handler,
)
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.monitoring import HealthChecker
from app.routes import blog_router
from app.utils.helpers import today_str
from app.utils.responses import success_response

logger = file_logger(getLogger(__name__))

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog content API: posts, search, counters and statistics over MongoDB",
    version="1.0.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

routes = [blog_router]

_ = [app.include_router(router) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (RequestValidationError, validation_exception_handler),
    (ValidationError, validation_exception_handler),
    (DatabaseError, database_exception_handler),
    (BaseAppError, create_exception_handler(logger)),
    (StarletteHTTPException, create_http_exception_handler(logger)),
    (Exception, create_unhandled_exception_handler(logger)),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "API is running",
                        "data": {
                            "status": "ready",
                            "timestamp": "2025-01-01T00:00:00.000Z",
                            "version": "v1",
                            "environment": "development",
                            "checks": {
                                "database": {"status": "pass", "response_ms": 3, "name": "blog_api"},
                                "disk": {"status": "pass", "usage_percent": 41.2},
                            },
                        },
                        "timestamp": "2025-01-01T00:00:00.000Z",
                    },
                },
            },
        },
        503: {"description": "Document store unreachable"},
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request, store: StoreDep) -> ORJSONResponse:
    """
    Health check including document store connectivity.

    Parameters
    ----------
    request : Request
        Current request context.
    store : BlogStore
        Store created in the lifespan.

    Returns
    -------
    ORJSONResponse
        200 when the store answers a ping, 503 otherwise.
    """
    status = await HealthChecker(store).check_readiness()
    if not status.is_healthy:
        logger.warning(f"Health check failed: {status.to_dict()['checks']}")

    return ORJSONResponse(
        content={
            "success": status.is_healthy,
            "message": "API is running" if status.is_healthy else "Health check failed",
            "data": status.to_dict(),
            "timestamp": today_str(),
        },
        status_code=HTTP_200_OK if status.is_healthy else HTTP_503_SERVICE_UNAVAILABLE,
    )


@app.get(
    "/health/live",
    tags=["🩺 Health"],
    summary="Liveness probe",
    operation_id="health_live",
)
@limiter.exempt
async def health_live(request: Request) -> ORJSONResponse:
    """Liveness only; never touches the document store."""
    return success_response(HealthChecker().check_liveness().to_dict(), message="API is alive")


@app.get(
    "/metrics",
    tags=["📈 Metrics"],
    summary="Get metrics",
    description="Get API performance metrics.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "timestamp": "2025-01-01T00:00:00.000Z",
                        "api_metrics": {
                            "request_counts": {"/blogs": 12},
                            "error_counts": {},
                            "avg_response_times": {"/blogs": 0.012},
                            "max_response_times": {"/blogs": 0.031},
                            "rate_limit_hits": 0,
                        },
                        "system_metrics": {"cpu_percent": 4.2, "disk_percent": 41.2},
                    },
                },
            },
        },
    },
    operation_id="get_metrics",
)
@limiter.limit("5/minute")
async def get_metrics(request: Request) -> ORJSONResponse:
    """
    Get API performance metrics.

    Notes
    -----
    Rate limited to 5 requests per minute.
    """
    api_metrics = metrics_manager.get_metrics()
    system_metrics = await get_system_metrics()

    return ORJSONResponse(
        content={
            "timestamp": today_str(),
            "api_metrics": api_metrics,
            "system_metrics": system_metrics,
        },
    )


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    operation_id="root_access",
)
@limiter.limit("60/minute")
async def root(request: Request) -> ORJSONResponse:
    """
    Service banner.

    Returns
    -------
    ORJSONResponse
        Version, environment and the main endpoint paths.
    """
    return success_response(
        {
            "version": settings.API_VERSION,
            "environment": settings.ENVIRONMENT,
            "endpoints": {
                "health": "/health",
                "blogs": "/blogs",
                "stats": "/blogs/stats",
                "docs": "/docs",
            },
        },
        message=settings.APP_NAME,
        status_code=HTTP_200_OK,
    )
