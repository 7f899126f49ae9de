# tests/repositories/test_query_builder.py
"""Tests for app/repositories/query.py module."""

import pytest
from pymongo import ASCENDING, DESCENDING

from app.repositories.query import build_filter, build_query
from app.schemas.query import BlogListQuery, SortOption


class TestBuildFilter:
    def test_no_conditions(self) -> None:
        assert build_filter(BlogListQuery()) == {}

    def test_published_false_is_kept(self) -> None:
        assert build_filter(BlogListQuery(published=False)) == {"published": False}

    def test_author_regex_is_escaped_and_case_insensitive(self) -> None:
        condition = build_filter(BlogListQuery(author="Tech (Team)"))["author"]
        assert condition == {"$regex": r"Tech\ \(Team\)", "$options": "i"}

    def test_tags_any_of(self) -> None:
        assert build_filter(BlogListQuery(tags=["ai", "ml"])) == {"tags": {"$in": ["ai", "ml"]}}

    def test_search_uses_text_index(self) -> None:
        assert build_filter(BlogListQuery(search="edge ai")) == {"$text": {"$search": "edge ai"}}

    def test_conditions_combined(self) -> None:
        result = build_filter(
            BlogListQuery(published=True, author="team", tags=["ai"], search="vision"),
        )
        assert set(result) == {"published", "author", "tags", "$text"}


class TestBuildQuery:
    @pytest.mark.parametrize(
        ("sort", "expected"),
        [
            (SortOption.NEWEST, [("createdAt", DESCENDING)]),
            (SortOption.OLDEST, [("createdAt", ASCENDING)]),
            (SortOption.POPULAR, [("views", DESCENDING)]),
            (SortOption.LIKED, [("likes", DESCENDING)]),
            (SortOption.TITLE, [("title", ASCENDING)]),
        ],
    )
    def test_sort_specs(self, sort: SortOption, expected: list) -> None:
        assert build_query(BlogListQuery(sort=sort)).sort == expected

    def test_page_window(self) -> None:
        plan = build_query(BlogListQuery(page=3, limit=5))
        assert plan.skip == 10
        assert plan.limit == 5
