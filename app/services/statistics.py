"""
Blog statistics service.

Computes collection-wide counts, top-N rankings and tag frequencies in a single
read-only pass over the blog collection.
"""

from asyncio import gather
from collections.abc import Callable
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING

from app.configs import Settings, settings
from app.configs.settings import STATS_TAG_LIMIT, STATS_TOP_LIMIT
from app.errors.database import translate_store_errors
from app.schemas.stats import (
    BlogCounts,
    BlogStats,
    RecentBlog,
    TagCount,
    TopLikedBlog,
    TopViewedBlog,
)

type Document = dict[str, Any]

POPULAR_TAGS_PIPELINE: list[Document] = [
    {"$unwind": "$tags"},
    {"$group": {"_id": "$tags", "count": {"$sum": 1}}},
    {"$sort": {"count": DESCENDING, "_id": ASCENDING}},
    {"$limit": STATS_TAG_LIMIT},
]


class BlogStatisticsService:
    """
    Aggregate statistics over all blog posts.

    Every query carries ``maxTimeMS`` so a slow scan surfaces as
    `OperationTimeoutError` instead of hanging the request.
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection[Document],
        config: Settings = settings,
    ) -> None:
        """
        Initialize the statistics service.

        Args:
            collection: Motor collection holding blog documents.
            config: Settings providing the statistics time budget.
        """
        self.collection = collection
        self.max_time_ms = config.STATS_QUERY_TIMEOUT_MS

    async def _count(self, match: Document) -> int:
        return await self.collection.count_documents(match, maxTimeMS=self.max_time_ms)

    async def _top[T](
        self,
        field: str,
        projection: list[str],
        build: Callable[[Document], T],
    ) -> list[T]:
        cursor = (
            self.collection.find({}, projection=projection)
            .sort([(field, DESCENDING)])
            .limit(STATS_TOP_LIMIT)
            .max_time_ms(self.max_time_ms)
        )
        return [build(document) for document in await cursor.to_list(length=STATS_TOP_LIMIT)]

    async def _popular_tags(self) -> list[TagCount]:
        cursor = self.collection.aggregate(POPULAR_TAGS_PIPELINE, maxTimeMS=self.max_time_ms)
        return [
            TagCount(tag=row["_id"], count=row["count"])
            for row in await cursor.to_list(length=STATS_TAG_LIMIT)
        ]

    async def compute(self) -> BlogStats:
        """
        Build the statistics report.

        Returns:
            BlogStats: Counts, top viewed/liked, most recent and popular tags.
                All counts are 0 and all lists empty on an empty collection.

        Raises:
            OperationTimeoutError: A query exceeded the statistics time budget.
            StoreUnavailableError: The store could not be reached.
        """
        with translate_store_errors("statistics"):
            (
                total,
                published,
                featured,
                top_viewed,
                top_liked,
                recent,
                popular_tags,
            ) = await gather(
                self._count({}),
                self._count({"published": True}),
                self._count({"featured": True}),
                self._top("views", ["title", "views", "slug"], TopViewedBlog.from_document),
                self._top("likes", ["title", "likes", "slug"], TopLikedBlog.from_document),
                self._top("createdAt", ["title", "createdAt", "slug"], RecentBlog.from_document),
                self._popular_tags(),
            )

        return BlogStats(
            counts=BlogCounts(total=total, published=published, featured=featured),
            top_viewed=top_viewed,
            top_liked=top_liked,
            recent=recent,
            popular_tags=popular_tags,
        )
