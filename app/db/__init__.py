"""Document store access."""

from app.db.database import BLOG_INDEXES, BlogStore, get_store

__all__ = [
    "BLOG_INDEXES",
    "BlogStore",
    "get_store",
]
