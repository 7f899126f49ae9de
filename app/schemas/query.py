"""Typed listing parameters for the blog collection."""

from dataclasses import dataclass
from enum import StrEnum

from app.configs.settings import DEFAULT_PAGE_SIZE


class SortOption(StrEnum):
    """Recognized listing orders."""

    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"
    LIKED = "liked"
    TITLE = "title"

    @classmethod
    def from_param(cls, value: str | None) -> "SortOption":
        """
        Resolve a raw ``sort`` query value.

        Unrecognized or missing values fall back to `SortOption.NEWEST`.
        """
        if value is None:
            return cls.NEWEST
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.NEWEST


def parse_tags_param(raw: str | None) -> list[str] | None:
    """Split a comma-separated ``tags`` parameter into lowercase tags."""
    if raw is None:
        return None
    tags = [tag.strip().lower() for tag in raw.split(",")]
    return [tag for tag in tags if tag] or None


@dataclass(frozen=True)
class BlogListQuery:
    """
    Query container for blog listing, filtering, search and sort.

    Parameters
    ----------
    page : int
        1-based page number.
    limit : int
        Page size.
    published : bool | None
        Exact match on the published flag.
    author : str | None
        Case-insensitive substring match on the author.
    tags : list[str] | None
        Match posts carrying any of these tags.
    search : str | None
        Full-text search over title and content.
    sort : SortOption
        Result order.
    """

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    published: bool | None = None
    author: str | None = None
    tags: list[str] | None = None
    search: str | None = None
    sort: SortOption = SortOption.NEWEST

    @property
    def skip(self) -> int:
        """Number of documents to skip for the requested page."""
        return (self.page - 1) * self.limit
