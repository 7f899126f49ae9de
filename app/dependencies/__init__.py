from app.dependencies.dependencies import (
    RepoDep,
    StatsDep,
    StoreDep,
    get_blog_repository,
    get_statistics_service,
)

__all__ = [
    "RepoDep",
    "StatsDep",
    "StoreDep",
    "get_blog_repository",
    "get_statistics_service",
]
