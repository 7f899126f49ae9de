from app.schemas.blog import BlogCreate, BlogResponse, BlogUpdate, LikeResponse
from app.schemas.query import BlogListQuery, SortOption, parse_tags_param
from app.schemas.responses import (
    ApiResponse,
    ErrorResponse,
    FieldError,
    PaginatedResponse,
    Pagination,
)
from app.schemas.stats import (
    BlogCounts,
    BlogStats,
    RecentBlog,
    TagCount,
    TopLikedBlog,
    TopViewedBlog,
)

__all__ = [
    "ApiResponse",
    "BlogCounts",
    "BlogCreate",
    "BlogListQuery",
    "BlogResponse",
    "BlogStats",
    "BlogUpdate",
    "ErrorResponse",
    "FieldError",
    "LikeResponse",
    "PaginatedResponse",
    "Pagination",
    "RecentBlog",
    "SortOption",
    "TagCount",
    "TopLikedBlog",
    "TopViewedBlog",
    "parse_tags_param",
]
