"""Translate listing parameters into a MongoDB filter, sort and page window."""

from dataclasses import dataclass, field
from re import escape
from typing import Any

from pymongo import ASCENDING, DESCENDING

from app.schemas.query import BlogListQuery, SortOption

type SortSpec = list[tuple[str, int]]

SORT_SPECS: dict[SortOption, SortSpec] = {
    SortOption.NEWEST: [("createdAt", DESCENDING)],
    SortOption.OLDEST: [("createdAt", ASCENDING)],
    SortOption.POPULAR: [("views", DESCENDING)],
    SortOption.LIKED: [("likes", DESCENDING)],
    SortOption.TITLE: [("title", ASCENDING)],
}


@dataclass(frozen=True)
class BlogQuery:
    """A ready-to-run ``find`` request."""

    filter: dict[str, Any] = field(default_factory=dict)
    sort: SortSpec = field(default_factory=lambda: SORT_SPECS[SortOption.NEWEST])
    skip: int = 0
    limit: int = 10


def build_filter(query: BlogListQuery) -> dict[str, Any]:
    """
    Build the filter document; every present condition is ANDed.

    Args:
        query: Validated listing parameters.

    Returns:
        dict: MongoDB filter, empty when no condition applies.
    """
    conditions: dict[str, Any] = {}
    if query.published is not None:
        conditions["published"] = query.published
    if query.author:
        conditions["author"] = {"$regex": escape(query.author), "$options": "i"}
    if query.tags:
        conditions["tags"] = {"$in": list(query.tags)}
    if query.search:
        conditions["$text"] = {"$search": query.search}
    return conditions


def build_query(query: BlogListQuery) -> BlogQuery:
    """Combine filter, sort order and page window for a listing request."""
    return BlogQuery(
        filter=build_filter(query),
        sort=SORT_SPECS[query.sort],
        skip=query.skip,
        limit=query.limit,
    )
