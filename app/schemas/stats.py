"""Schemas for aggregate blog statistics."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _with_id(document: dict[str, Any]) -> dict[str, Any]:
    data = {key: value for key, value in document.items() if key != "_id"}
    data["id"] = str(document["_id"])
    return data


class BlogCounts(BaseModel):
    """Collection-wide document counts."""

    total: int = 0
    published: int = 0
    featured: int = 0


class TopViewedBlog(BaseModel):
    """Projection used by the most-viewed ranking."""

    id: str
    title: str
    views: int
    slug: str

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "TopViewedBlog":
        return cls.model_validate(_with_id(document))


class TopLikedBlog(BaseModel):
    """Projection used by the most-liked ranking."""

    id: str
    title: str
    likes: int
    slug: str

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "TopLikedBlog":
        return cls.model_validate(_with_id(document))


class RecentBlog(BaseModel):
    """Projection used by the most-recent listing."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    created_at: datetime = Field(alias="createdAt")
    slug: str

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "RecentBlog":
        return cls.model_validate(_with_id(document))


class TagCount(BaseModel):
    """Occurrences of a single tag across all posts."""

    tag: str
    count: int


class BlogStats(BaseModel):
    """Aggregate statistics report."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "counts": {"total": 5, "published": 4, "featured": 2},
                "topViewed": [
                    {"id": "665f1c2e8b1e4a3d2c1b0a99", "title": "Edge AI", "views": 42, "slug": "edge-ai"},
                ],
                "topLiked": [
                    {"id": "665f1c2e8b1e4a3d2c1b0a99", "title": "Edge AI", "likes": 7, "slug": "edge-ai"},
                ],
                "recent": [
                    {
                        "id": "665f1c2e8b1e4a3d2c1b0a99",
                        "title": "Edge AI",
                        "createdAt": "2025-01-01T00:00:00Z",
                        "slug": "edge-ai",
                    },
                ],
                "popularTags": [{"tag": "ai", "count": 3}],
            },
        },
    )

    counts: BlogCounts = Field(default_factory=BlogCounts)
    top_viewed: list[TopViewedBlog] = Field(default_factory=list, alias="topViewed")
    top_liked: list[TopLikedBlog] = Field(default_factory=list, alias="topLiked")
    recent: list[RecentBlog] = Field(default_factory=list)
    popular_tags: list[TagCount] = Field(default_factory=list, alias="popularTags")
