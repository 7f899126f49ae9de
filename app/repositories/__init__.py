"""Repository layer for database operations."""

from app.repositories.blog import BlogRepository, to_object_id
from app.repositories.query import BlogQuery, build_filter, build_query

__all__ = [
    "BlogQuery",
    "BlogRepository",
    "build_filter",
    "build_query",
    "to_object_id",
]
