"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the blog content API.
"""

from logging import INFO, Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
from pythonjsonlogger.json import JsonFormatter

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# --- Blog field constraints ---
TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
CONTENT_MIN_LENGTH = 10
AUTHOR_MIN_LENGTH = 2
AUTHOR_MAX_LENGTH = 100
TAG_MIN_LENGTH = 1
TAG_MAX_LENGTH = 30
TAG_PATTERN = r"[a-zA-Z0-9\-_]+"
DEFAULT_AUTHOR = "Anonymous"
EXCERPT_LENGTH = 150

# --- Listing & statistics ---
DEFAULT_PAGE_SIZE = 10
STATS_TOP_LIMIT = 5
STATS_TAG_LIMIT = 10

# Response constants
DEFAULT_ERROR_MESSAGE = "Internal Server Error"
NOT_FOUND_MESSAGE = "Blog post not found"
DUPLICATE_MESSAGE = "A blog post with this title already exists"
TIMEOUT_MESSAGE = "Database operation timed out. Please try again."
UNAVAILABLE_MESSAGE = "Database connection error. Please try again later."


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Blog Content API"
    API_VERSION: str = "v1"
    DEBUG: bool = False

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_FILE: str = "logs/app.log"
    PRODUCTION_FRONTEND_URL: str | None = None

    # MongoDB Configuration
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "blog_api"
    MONGODB_COLLECTION: str = "blogs"
    MONGODB_MAX_POOL_SIZE: int = 10
    MONGODB_MIN_POOL_SIZE: int = 5
    MONGODB_MAX_IDLE_TIME_MS: int = 30000
    MONGODB_WAIT_QUEUE_TIMEOUT_MS: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 30000
    MONGODB_CONNECT_TIMEOUT_MS: int = 30000
    MONGODB_SOCKET_TIMEOUT_MS: int = 45000
    MONGODB_RETRY_WRITES: bool = True
    MONGODB_RETRY_READS: bool = True

    # Per-operation time budgets
    LIST_QUERY_TIMEOUT_MS: int = 20000
    COUNT_QUERY_TIMEOUT_MS: int = 10000
    STATS_QUERY_TIMEOUT_MS: int = 20000
    HEALTH_CHECK_TIMEOUT: float = 2.0  # seconds
    SLOW_REQUEST_MS: int = 1000

    # Startup
    STARTUP_CONNECT_RETRIES: int = 3
    STARTUP_RETRY_DELAY: float = 1.0  # seconds


settings = Settings()


class LimiterConfig(BaseSettings):
    """Rate limiter configuration passed straight to slowapi's `Limiter`."""

    model_config = SettingsConfigDict(env_prefix="LIMITER_", case_sensitive=False)

    default_limits: list[str] = ["100/minute"]
    storage_uri: str = "memory://"
    headers_enabled: bool = False
    enabled: bool = True


def file_logger(logger: Logger) -> Logger:
    """
    Attach a rotating JSON file handler to `logger` when file logging is enabled.

    Args:
        logger: Logger to extend.

    Returns:
        The same logger, for chaining at module level.
    """
    if not settings.LOG_TO_FILE:
        return logger

    log_file = Path(settings.LOG_FILE)
    already_attached = any(
        isinstance(h, RotatingFileHandler) and Path(h.baseFilename) == log_file.resolve()
        for h in logger.handlers
    )
    if already_attached:
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.setLevel(INFO)
    handler.setFormatter(JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger
