"""MongoDB client lifecycle and collection access."""

from logging import getLogger
from typing import Any

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel

from app.configs import Settings, file_logger, settings
from app.decorators.with_retry import with_retry
from app.errors.database import StoreUnavailableError, translate_store_errors

logger = file_logger(getLogger(__name__))

BLOG_INDEXES = [
    IndexModel([("slug", ASCENDING)], unique=True, name="slug_unique"),
    IndexModel([("title", TEXT), ("content", TEXT)], name="title_content_text"),
    IndexModel([("published", ASCENDING)], name="published"),
    IndexModel([("createdAt", DESCENDING)], name="created_at_desc"),
]


class BlogStore:
    """
    Owns the Motor client for the lifetime of the application.

    One instance is created in the lifespan handler and stored on
    ``app.state.store``; handlers reach it through `get_store`.

    Parameters
    ----------
    config : Settings
        Connection string, database/collection names and pool options.
    client : AsyncIOMotorClient | None
        Pre-built client, mainly for tests. Built from ``config`` when omitted.
    """

    def __init__(
        self,
        config: Settings = settings,
        client: AsyncIOMotorClient[dict[str, Any]] | None = None,
    ) -> None:
        self.config = config
        self.client = client or AsyncIOMotorClient(
            config.MONGODB_URI,
            maxPoolSize=config.MONGODB_MAX_POOL_SIZE,
            minPoolSize=config.MONGODB_MIN_POOL_SIZE,
            maxIdleTimeMS=config.MONGODB_MAX_IDLE_TIME_MS,
            waitQueueTimeoutMS=config.MONGODB_WAIT_QUEUE_TIMEOUT_MS,
            serverSelectionTimeoutMS=config.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            connectTimeoutMS=config.MONGODB_CONNECT_TIMEOUT_MS,
            socketTimeoutMS=config.MONGODB_SOCKET_TIMEOUT_MS,
            retryWrites=config.MONGODB_RETRY_WRITES,
            retryReads=config.MONGODB_RETRY_READS,
            tz_aware=True,
        )

    @property
    def database(self) -> AsyncIOMotorDatabase[dict[str, Any]]:
        return self.client[self.config.MONGODB_DATABASE]

    @property
    def blogs(self) -> AsyncIOMotorCollection[dict[str, Any]]:
        """The blog posts collection."""
        return self.database[self.config.MONGODB_COLLECTION]

    async def ping(self) -> None:
        """Round-trip a ``ping`` command; raises the driver error on failure."""
        await self.client.admin.command("ping")

    async def connect(self) -> None:
        """
        Verify connectivity at startup.

        The ping is retried with exponential backoff on connection failures
        (``STARTUP_CONNECT_RETRIES`` attempts) before the error propagates and
        startup aborts.
        """
        ping = with_retry(
            max_retries=self.config.STARTUP_CONNECT_RETRIES,
            base_delay=self.config.STARTUP_RETRY_DELAY,
            max_delay=self.config.STARTUP_RETRY_DELAY * 8,
        )(self.ping)
        await ping()
        logger.info(f"Connected to MongoDB database '{self.config.MONGODB_DATABASE}'")

    async def ensure_indexes(self) -> None:
        """Create the blog collection indexes (no-op for existing ones)."""
        with translate_store_errors("index creation"):
            names = await self.blogs.create_indexes(BLOG_INDEXES)
        logger.info(f"Blog indexes ensured: {', '.join(names)}")

    def close(self) -> None:
        self.client.close()
        logger.info("MongoDB connection closed")


def get_store(request: Request) -> BlogStore:
    """
    FastAPI dependency returning the store created in the lifespan.

    Raises:
        StoreUnavailableError: The lifespan has not (successfully) set up a store.
    """
    store: BlogStore | None = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreUnavailableError
    return store
