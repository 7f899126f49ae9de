# app/routes/blog.py

"""
Blog Routes.

Provides CRUD endpoints, listing/search, counters and statistics for blog posts
with standardized documentation and rate limiting.

Summary
-------
Endpoints include:
  - List blogs (filters, full-text search, sort, pagination)
  - Blog statistics
  - Get blog by slug
  - Get blog by id
  - Create blog
  - Update blog
  - Delete blog
  - Like blog

Dependencies
------------
  - `RepoDep`: Repository bound to the blogs collection.
  - `StatsDep`: Statistics service bound to the blogs collection.

Rate Limiting
-------------
Reads allow 60 requests/minute and writes 20 requests/minute per client IP. Tiered
limits apply when `X-API-Key` is present (120 and 60 respectively).
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Body, Depends, Path, Query, Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from app.configs.settings import DEFAULT_PAGE_SIZE
from app.decorators import timed
from app.dependencies import RepoDep, StatsDep
from app.managers import limiter, read_limit, write_limit
from app.schemas import (
    ApiResponse,
    BlogCreate,
    BlogListQuery,
    BlogResponse,
    BlogStats,
    BlogUpdate,
    ErrorResponse,
    LikeResponse,
    PaginatedResponse,
    Pagination,
    SortOption,
    parse_tags_param,
)
from app.utils.responses import paginated_response, success_response

router = APIRouter(prefix="/blogs", tags=["📝 Blogs"])

BlogIdPath = Annotated[str, Path(description="Blog id (24-character hex ObjectId)")]

NOT_FOUND_RESPONSE = {
    "model": ErrorResponse,
    "description": "Blog post not found (or malformed id)",
    "content": {
        "application/json": {
            "example": {
                "success": False,
                "message": "Blog post not found",
                "timestamp": "2025-01-01T00:00:00.000Z",
            },
        },
    },
}
VALIDATION_RESPONSE = {
    "model": ErrorResponse,
    "description": "Validation errors",
    "content": {
        "application/json": {
            "example": {
                "success": False,
                "message": "Validation errors",
                "errors": [
                    {
                        "field": "title",
                        "message": "Title must be between 3 and 200 characters",
                        "type": "value_error",
                    },
                ],
                "timestamp": "2025-01-01T00:00:00.000Z",
            },
        },
    },
}
RATE_LIMIT_RESPONSE = {"model": ErrorResponse, "description": "Rate limit exceeded"}


def get_blog_list_query(
    page: Annotated[int, Query(ge=1, description="Page number (1-based)")] = 1,
    limit: Annotated[
        int,
        Query(ge=1, description="Maximum number of records to return"),
    ] = DEFAULT_PAGE_SIZE,
    published: Annotated[
        Literal["true", "false"] | None,
        Query(description="Filter on the published flag"),
    ] = None,
    author: Annotated[
        str | None,
        Query(description="Case-insensitive substring match on author"),
    ] = None,
    tags: Annotated[
        str | None,
        Query(description="Comma-separated tags; matches posts carrying any of them"),
    ] = None,
    search: Annotated[str | None, Query(description="Full-text search on title and content")] = None,
    sort: Annotated[
        str | None,
        Query(description="newest (default), oldest, popular, liked or title"),
    ] = None,
) -> BlogListQuery:
    """
    Dependency to construct `BlogListQuery` from query parameters.

    Returns
    -------
    BlogListQuery
        Aggregated query parameters object.
    """
    return BlogListQuery(
        page=page,
        limit=limit,
        published=None if published is None else published == "true",
        author=author.strip() or None if author else None,
        tags=parse_tags_param(tags),
        search=search.strip() or None if search else None,
        sort=SortOption.from_param(sort),
    )


ListQueryDep = Annotated[BlogListQuery, Depends(get_blog_list_query)]


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=PaginatedResponse[BlogResponse],
    summary="List blog posts",
    description="List blog posts with filters, full-text search, sorting and pagination.",
    responses={400: VALIDATION_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="blogs_list",
)
@timed("/blogs")
@limiter.limit(read_limit)
async def list_blogs(
    request: Request,
    query: ListQueryDep,
    repo: RepoDep,
) -> ORJSONResponse:
    """
    List blog posts.

    Parameters
    ----------
    request : Request
        Current request context (used by the rate limiter).
    query : BlogListQuery
        Pagination, filter, search and sort parameters.
    repo : BlogRepository
        Repository dependency.

    Returns
    -------
    ORJSONResponse
        Page of posts with ``pagination = {page, limit, total, pages}``.
    """
    documents, total = await repo.list(query)
    return paginated_response(
        [BlogResponse.from_document(document) for document in documents],
        Pagination.build(query.page, query.limit, total),
        message="Blog posts retrieved successfully",
    )


@router.get(
    "/stats",
    response_class=ORJSONResponse,
    response_model=ApiResponse[BlogStats],
    summary="Blog statistics",
    description="Counts, most viewed, most liked, most recent posts and popular tags.",
    responses={429: RATE_LIMIT_RESPONSE},
    operation_id="blogs_stats",
)
@timed("/blogs/stats")
@limiter.limit(read_limit)
async def get_blog_stats(request: Request, stats: StatsDep) -> ORJSONResponse:
    """Compute aggregate statistics over the whole collection."""
    return success_response(
        await stats.compute(),
        message="Blog statistics retrieved successfully",
    )


@router.get(
    "/slug/{slug}",
    response_class=ORJSONResponse,
    response_model=ApiResponse[BlogResponse],
    summary="Get a blog post by slug",
    description="Fetch a single post by slug. Each fetch counts as a view.",
    responses={404: NOT_FOUND_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="blogs_get_by_slug",
)
@timed("/blogs/slug/{slug}")
@limiter.limit(read_limit)
async def get_blog_by_slug(
    request: Request,
    slug: Annotated[str, Path(description="URL slug derived from the title")],
    repo: RepoDep,
) -> ORJSONResponse:
    """
    Get a blog post by slug.

    Parameters
    ----------
    request : Request
        Current request context.
    slug : str
        Post slug.
    repo : BlogRepository
        Repository dependency.

    Returns
    -------
    ORJSONResponse
        The post, with its view count already incremented.
    """
    document = await repo.get_by_slug(slug)
    return success_response(
        BlogResponse.from_document(document),
        message="Blog post retrieved successfully",
    )


@router.get(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=ApiResponse[BlogResponse],
    summary="Get a blog post by id",
    description="Fetch a single post by id. Each fetch counts as a view.",
    responses={404: NOT_FOUND_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="blogs_get_by_id",
)
@timed("/blogs/{id}")
@limiter.limit(read_limit)
async def get_blog(request: Request, blog_id: BlogIdPath, repo: RepoDep) -> ORJSONResponse:
    """Get a blog post by id; a malformed id is reported as not found."""
    document = await repo.get_by_id(blog_id)
    return success_response(
        BlogResponse.from_document(document),
        message="Blog post retrieved successfully",
    )


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=ApiResponse[BlogResponse],
    status_code=HTTP_201_CREATED,
    summary="Create a new blog post",
    description=(
        "Create a post. The slug is derived from the title; views and likes start at 0. "
        "Server-managed fields in the body are ignored."
    ),
    responses={400: VALIDATION_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="blogs_create",
)
@timed("/blogs/create")
@limiter.limit(write_limit)
async def create_blog(
    request: Request,
    blog: Annotated[
        BlogCreate,
        Body(
            examples=[
                {
                    "title": "AI Basics",
                    "content": "An introduction to artificial intelligence.",
                    "tags": ["AI", "ml"],
                },
            ],
        ),
    ],
    repo: RepoDep,
) -> ORJSONResponse:
    """
    Create a new blog post.

    Parameters
    ----------
    request : Request
        Current request context.
    blog : BlogCreate
        Validated creation payload.
    repo : BlogRepository
        Repository dependency.

    Returns
    -------
    ORJSONResponse
        The stored post with status 201.

    Raises
    ------
    DuplicateEntryError
        Another post already has the derived slug.
    """
    document = await repo.create(blog)
    return success_response(
        BlogResponse.from_document(document),
        message="Blog post created successfully",
        status_code=HTTP_201_CREATED,
    )


@router.put(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=ApiResponse[BlogResponse],
    summary="Update a blog post",
    description="Partial update: only fields present in the body change.",
    responses={400: VALIDATION_RESPONSE, 404: NOT_FOUND_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="blogs_update",
)
@timed("/blogs/update")
@limiter.limit(write_limit)
async def update_blog(
    request: Request,
    blog_id: BlogIdPath,
    blog: BlogUpdate,
    repo: RepoDep,
) -> ORJSONResponse:
    """
    Update a blog post.

    A new title re-derives the slug. Counters, slug and timestamps sent by the
    client are ignored.
    """
    document = await repo.update(blog_id, blog)
    return success_response(
        BlogResponse.from_document(document),
        message="Blog post updated successfully",
    )


@router.delete(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=ApiResponse[BlogResponse],
    summary="Delete a blog post",
    description="Delete a post permanently and return its last state.",
    responses={404: NOT_FOUND_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="blogs_delete",
)
@timed("/blogs/delete")
@limiter.limit(write_limit)
async def delete_blog(request: Request, blog_id: BlogIdPath, repo: RepoDep) -> ORJSONResponse:
    document = await repo.delete(blog_id)
    return success_response(
        BlogResponse.from_document(document),
        message="Blog post deleted successfully",
    )


@router.patch(
    "/{blog_id}/like",
    response_class=ORJSONResponse,
    response_model=ApiResponse[LikeResponse],
    summary="Like a blog post",
    description="Atomically increment the like counter.",
    responses={404: NOT_FOUND_RESPONSE, 429: RATE_LIMIT_RESPONSE},
    operation_id="blogs_like",
)
@timed("/blogs/like")
@limiter.limit(write_limit)
async def like_blog(request: Request, blog_id: BlogIdPath, repo: RepoDep) -> ORJSONResponse:
    """Increment likes and return only the new count."""
    likes = await repo.like(blog_id)
    return success_response(LikeResponse(likes=likes), message="Blog post liked")
