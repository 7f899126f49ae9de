"""Blog document model for MongoDB."""

from datetime import datetime
from re import compile as re_compile
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.configs.settings import (
    AUTHOR_MAX_LENGTH,
    AUTHOR_MIN_LENGTH,
    CONTENT_MIN_LENGTH,
    DEFAULT_AUTHOR,
    EXCERPT_LENGTH,
    TAG_MAX_LENGTH,
    TAG_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)

_NON_ALPHANUMERIC_RUN = re_compile(r"[^a-z0-9]+")


def derive_slug(title: str) -> str:
    """
    Derive a URL-safe slug from a blog title.

    Lowercases the title, collapses every run of characters outside
    ``[a-z0-9]`` into a single hyphen and trims hyphens at both ends.

    Args:
        title: Blog title.

    Returns:
        str: Slug, e.g. ``"getting-started-2024"`` for ``"Getting Started!! 2024"``.
    """
    return _NON_ALPHANUMERIC_RUN.sub("-", title.lower()).strip("-")


def make_excerpt(content: str) -> str:
    """Return content cut to the excerpt length with a trailing ellipsis when longer."""
    if len(content) > EXCERPT_LENGTH:
        return f"{content[:EXCERPT_LENGTH]}..."
    return content


def normalize_tags(tags: list[str]) -> list[str]:
    """Trim and lowercase tags, preserving order."""
    return [tag.strip().lower() for tag in tags]


class BlogDocument(BaseModel):
    """
    Full blog document as persisted in the ``blogs`` collection.

    Validating a materialized document (a fresh insert, or an existing document
    merged with an update patch) enforces the schema-level rules regardless of
    which fields the client sent.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    content: str = Field(min_length=CONTENT_MIN_LENGTH)
    thumbnail: str | None = None
    author: str = Field(
        default=DEFAULT_AUTHOR,
        min_length=AUTHOR_MIN_LENGTH,
        max_length=AUTHOR_MAX_LENGTH,
    )
    tags: list[str] = Field(default_factory=list)
    published: bool = True
    featured: bool = False
    slug: str = Field(min_length=1)
    views: int = Field(default=0, ge=0)
    likes: int = Field(default=0, ge=0)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("title", "content", "author", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace before length checks."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("thumbnail", mode="before")
    @classmethod
    def strip_thumbnail(cls, v: Any) -> Any:
        """Trim the thumbnail URL; blank becomes ``None``."""
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("tags", mode="after")
    @classmethod
    def lowercase_tags(cls, v: list[str]) -> list[str]:
        """Store tags lowercase."""
        return normalize_tags(v)

    @field_validator("slug", mode="after")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        """Reject slugs that did not come out of `derive_slug`."""
        if v != derive_slug(v):
            mssg = "Slug must be lowercase alphanumeric with hyphens only"
            raise ValueError(mssg)
        return v

    def to_mongo(self) -> dict[str, Any]:
        """Return the document ready for insertion (camelCase timestamps)."""
        return self.model_dump(by_alias=True)


def new_blog_document(payload: dict[str, Any], now: datetime) -> BlogDocument:
    """
    Build a new blog document from an accepted create payload.

    Applies defaults, derives the slug from the title and zeroes the counters.

    Args:
        payload: Validated create fields (no server-managed fields).
        now: Timestamp used for both ``createdAt`` and ``updatedAt``.

    Returns:
        BlogDocument: Validated document.
    """
    data = {key: value for key, value in payload.items() if value is not None}
    data["slug"] = derive_slug(str(data.get("title", "")))
    data["views"] = 0
    data["likes"] = 0
    data["createdAt"] = now
    data["updatedAt"] = now
    return BlogDocument.model_validate(data)
