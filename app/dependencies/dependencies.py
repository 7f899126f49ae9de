# app/dependencies/dependencies.py

"""Application dependencies wiring the store into repositories and services."""

from typing import Annotated

from fastapi import Depends

from app.db import BlogStore, get_store
from app.repositories import BlogRepository
from app.services import BlogStatisticsService

StoreDep = Annotated[BlogStore, Depends(get_store)]


def get_blog_repository(store: StoreDep) -> BlogRepository:
    """
    Resolve the `BlogRepository` dependency.

    Parameters
    ----------
    store : BlogStore
        Store created in the application lifespan.

    Returns
    -------
    BlogRepository
        Repository bound to the blogs collection.
    """
    return BlogRepository(store.blogs, store.config)


def get_statistics_service(store: StoreDep) -> BlogStatisticsService:
    """Resolve the `BlogStatisticsService` dependency."""
    return BlogStatisticsService(store.blogs, store.config)


RepoDep = Annotated[BlogRepository, Depends(get_blog_repository)]
StatsDep = Annotated[BlogStatisticsService, Depends(get_statistics_service)]
