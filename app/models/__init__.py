"""Document models."""

from app.models.blog import (
    BlogDocument,
    derive_slug,
    make_excerpt,
    new_blog_document,
    normalize_tags,
)

__all__ = [
    "BlogDocument",
    "derive_slug",
    "make_excerpt",
    "new_blog_document",
    "normalize_tags",
]
