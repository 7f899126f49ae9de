"""
Blog schemas for the blog content API.

This module defines the request payloads (create/update) with their field-level
validation rules and the response model used to serialize stored documents.
"""

from datetime import datetime
from re import fullmatch
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    computed_field,
    field_validator,
)

from app.configs.settings import (
    AUTHOR_MAX_LENGTH,
    AUTHOR_MIN_LENGTH,
    CONTENT_MIN_LENGTH,
    TAG_MAX_LENGTH,
    TAG_MIN_LENGTH,
    TAG_PATTERN,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from app.models.blog import make_excerpt

_BOOLEAN_STRINGS = {"true": True, "false": False}


class BlogFields(BaseModel):
    """
    Shared validation rules for blog write payloads.

    Every rule runs independently so a single request reports all failing
    fields at once. Server-managed fields (slug, views, likes, timestamps) are
    not declared and therefore silently dropped from client input.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=False)

    @field_validator("title", "content", "author", mode="before", check_fields=False)
    @classmethod
    def strip_required_text(cls, v: Any, info: ValidationInfo) -> Any:
        """Reject explicit nulls and trim surrounding whitespace."""
        if v is None:
            mssg = f"{info.field_name.capitalize()} cannot be null"
            raise ValueError(mssg)
        return v.strip() if isinstance(v, str) else v

    @field_validator("thumbnail", mode="before", check_fields=False)
    @classmethod
    def strip_thumbnail(cls, v: Any) -> Any:
        """Trim the thumbnail URL."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("title", mode="after", check_fields=False)
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Title length after trimming."""
        if not TITLE_MIN_LENGTH <= len(v) <= TITLE_MAX_LENGTH:
            mssg = f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters"
            raise ValueError(mssg)
        return v

    @field_validator("content", mode="after", check_fields=False)
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Content length after trimming."""
        if len(v) < CONTENT_MIN_LENGTH:
            mssg = f"Content must be at least {CONTENT_MIN_LENGTH} characters long"
            raise ValueError(mssg)
        return v

    @field_validator("author", mode="after", check_fields=False)
    @classmethod
    def validate_author(cls, v: str) -> str:
        """Author length after trimming."""
        if not AUTHOR_MIN_LENGTH <= len(v) <= AUTHOR_MAX_LENGTH:
            mssg = (
                f"Author name must be between {AUTHOR_MIN_LENGTH} "
                f"and {AUTHOR_MAX_LENGTH} characters"
            )
            raise ValueError(mssg)
        return v

    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def ensure_tag_list(cls, v: Any) -> Any:
        """Tags must arrive as a JSON array."""
        if not isinstance(v, list):
            mssg = "Tags must be an array"
            raise ValueError(mssg)
        return v

    @field_validator("tags", mode="after", check_fields=False)
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Validate each tag's length and charset, then lowercase it."""
        for tag in v:
            if not TAG_MIN_LENGTH <= len(tag) <= TAG_MAX_LENGTH:
                mssg = f"Each tag must be between {TAG_MIN_LENGTH} and {TAG_MAX_LENGTH} characters"
                raise ValueError(mssg)
            if not fullmatch(TAG_PATTERN, tag):
                mssg = "Tags can only contain letters, numbers, hyphens, and underscores"
                raise ValueError(mssg)
        return [tag.lower() for tag in v]

    @field_validator("published", "featured", mode="before", check_fields=False)
    @classmethod
    def validate_flag(cls, v: Any, info: ValidationInfo) -> bool:
        """Accept JSON booleans and the strings ``"true"``/``"false"``."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str) and v.lower() in _BOOLEAN_STRINGS:
            return _BOOLEAN_STRINGS[v.lower()]
        mssg = f"{info.field_name.capitalize()} must be a boolean value"
        raise ValueError(mssg)


class BlogCreate(BlogFields):
    """Blog creation payload (title and content required)."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Getting Started with Camera AI Technology",
                "content": "Camera AI technology is revolutionizing how we process visual data.",
                "author": "Tech Team",
                "tags": ["ai", "computer-vision"],
                "published": True,
                "featured": False,
            },
        },
    )

    title: str = Field(..., description="Blog title (3-200 characters)")
    content: str = Field(..., description="Blog content (at least 10 characters)")
    thumbnail: str | None = Field(default=None, description="Thumbnail URL")
    author: str | None = Field(default=None, description="Author name (defaults to Anonymous)")
    tags: list[str] | None = Field(default=None, description="Tags for categorization")
    published: bool | None = Field(default=None, description="Published flag (default true)")
    featured: bool | None = Field(default=None, description="Featured flag (default false)")


class BlogUpdate(BlogFields):
    """Blog update payload (all fields optional, present fields validated)."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Understanding Object Detection Algorithms (2nd edition)",
                "tags": ["object-detection", "yolo"],
                "featured": True,
            },
        },
    )

    title: str | None = None
    content: str | None = None
    thumbnail: str | None = None
    author: str | None = None
    tags: list[str] | None = None
    published: bool | None = None
    featured: bool | None = None

    def to_patch(self) -> dict[str, Any]:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class BlogResponse(BaseModel):
    """Blog response model (serialized with camelCase timestamps)."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    title: str
    content: str
    thumbnail: str | None = None
    author: str
    tags: list[str]
    published: bool
    featured: bool
    slug: str
    views: int
    likes: int
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @computed_field
    @property
    def excerpt(self) -> str:
        """First 150 characters of content with an ellipsis when truncated."""
        return make_excerpt(self.content)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "BlogResponse":
        """
        Build a response from a raw MongoDB document.

        Args:
            document: Document as returned by the driver (with ``_id``).

        Returns:
            BlogResponse: Serializable model.
        """
        data = {key: value for key, value in document.items() if key != "_id"}
        data["id"] = str(document["_id"])
        return cls.model_validate(data)


class LikeResponse(BaseModel):
    """Like counter after an increment."""

    likes: int = Field(ge=0)
