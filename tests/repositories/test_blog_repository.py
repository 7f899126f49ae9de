# tests/repositories/test_blog_repository.py
"""Tests for app/repositories/blog.py against the in-memory collection."""

from datetime import UTC, datetime, timedelta

import pytest
from bson import ObjectId
from pymongo.errors import ExecutionTimeout, ServerSelectionTimeoutError

from app.errors import (
    DuplicateEntryError,
    OperationTimeoutError,
    RecordNotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from app.repositories import BlogRepository
from app.schemas import BlogCreate, BlogListQuery, BlogUpdate, SortOption
from tests.fakes import FakeCollection


class TestCreate:
    async def test_create_derives_slug_and_zeroes_counters(self, repo: BlogRepository) -> None:
        document = await repo.create(
            BlogCreate(title="AI Basics", content="Intro to AI and more.", tags=["AI", "ml"]),
        )
        assert isinstance(document["_id"], ObjectId)
        assert document["slug"] == "ai-basics"
        assert document["tags"] == ["ai", "ml"]
        assert document["views"] == 0
        assert document["likes"] == 0
        assert document["author"] == "Anonymous"
        assert document["createdAt"] == document["updatedAt"]

    async def test_duplicate_slug(self, repo: BlogRepository, make_blog) -> None:
        await make_blog("AI Basics")
        with pytest.raises(DuplicateEntryError) as exc_info:
            await make_blog("ai   basics!")
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "A blog post with this title already exists"

    async def test_title_without_slug_characters(self, repo: BlogRepository) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await repo.create(BlogCreate(title="!!!", content="Intro to AI and more."))
        assert exc_info.value.errors[0].field == "slug"


class TestReads:
    async def test_round_trip_increments_views(self, repo: BlogRepository, make_blog) -> None:
        created = await make_blog("AI Basics", author="Tech Team")
        fetched = await repo.get_by_id(str(created["_id"]))
        assert fetched["views"] == created["views"] + 1
        for field in ("title", "content", "author", "tags", "published", "featured", "slug"):
            assert fetched[field] == created[field]

    async def test_get_by_slug_increments_views(self, repo: BlogRepository, make_blog) -> None:
        await make_blog("AI Basics")
        await repo.get_by_slug("ai-basics")
        document = await repo.get_by_slug("ai-basics")
        assert document["views"] == 2

    async def test_missing_id(self, repo: BlogRepository) -> None:
        with pytest.raises(RecordNotFoundError):
            await repo.get_by_id(str(ObjectId()))

    @pytest.mark.parametrize("blog_id", ["not-an-id", "123", "zzzzzzzzzzzzzzzzzzzzzzzz"])
    async def test_malformed_id_is_not_found(self, repo: BlogRepository, blog_id: str) -> None:
        with pytest.raises(RecordNotFoundError) as exc_info:
            await repo.get_by_id(blog_id)
        assert exc_info.value.status_code == 404

    async def test_missing_slug(self, repo: BlogRepository) -> None:
        with pytest.raises(RecordNotFoundError):
            await repo.get_by_slug("nope")


class TestList:
    async def _seed(self, collection: FakeCollection, count: int) -> None:
        base = datetime(2025, 1, 1, tzinfo=UTC)
        for index in range(count):
            await collection.insert_one(
                {
                    "title": f"Post {index:02d}",
                    "content": "Some sample content for the post.",
                    "thumbnail": None,
                    "author": "Tech Team" if index % 2 else "Data Team",
                    "tags": ["ai"] if index % 3 == 0 else ["iot"],
                    "published": index % 4 != 0,
                    "featured": False,
                    "slug": f"post-{index:02d}",
                    "views": index,
                    "likes": count - index,
                    "createdAt": base + timedelta(days=index),
                    "updatedAt": base + timedelta(days=index),
                },
            )

    async def test_pagination_partitions_results(
        self,
        repo: BlogRepository,
        collection: FakeCollection,
    ) -> None:
        await self._seed(collection, 23)
        slugs: list[str] = []
        for page in (1, 2, 3):
            documents, total = await repo.list(BlogListQuery(page=page, limit=10))
            assert total == 23
            assert len(documents) == min(10, 23 - (page - 1) * 10)
            slugs.extend(document["slug"] for document in documents)
        assert len(set(slugs)) == 23

    async def test_default_sort_is_newest(self, repo: BlogRepository, collection: FakeCollection) -> None:
        await self._seed(collection, 5)
        documents, _ = await repo.list(BlogListQuery())
        assert [d["slug"] for d in documents] == ["post-04", "post-03", "post-02", "post-01", "post-00"]

    async def test_sort_popular(self, repo: BlogRepository, collection: FakeCollection) -> None:
        await self._seed(collection, 5)
        documents, _ = await repo.list(BlogListQuery(sort=SortOption.POPULAR))
        views = [d["views"] for d in documents]
        assert views == sorted(views, reverse=True)

    async def test_published_filter(self, repo: BlogRepository, collection: FakeCollection) -> None:
        await self._seed(collection, 8)
        documents, total = await repo.list(BlogListQuery(published=False, limit=100))
        assert total == 2
        assert all(document["published"] is False for document in documents)

    async def test_tags_filter(self, repo: BlogRepository, collection: FakeCollection) -> None:
        await self._seed(collection, 9)
        documents, total = await repo.list(BlogListQuery(tags=["ai"], limit=100))
        assert total == 3
        assert all("ai" in document["tags"] for document in documents)

    async def test_author_filter(self, repo: BlogRepository, collection: FakeCollection) -> None:
        await self._seed(collection, 6)
        _, total = await repo.list(BlogListQuery(author="tech"))
        assert total == 3

    async def test_time_budgets_passed(self, repo: BlogRepository, collection: FakeCollection) -> None:
        await repo.list(BlogListQuery())
        assert ("count_documents", {"maxTimeMS": 10000}) in collection.calls

    async def test_timeout_maps_to_408(self, repo: BlogRepository, collection: FakeCollection) -> None:
        collection.fail_with = ExecutionTimeout("operation exceeded time limit", 50)
        with pytest.raises(OperationTimeoutError) as exc_info:
            await repo.list(BlogListQuery())
        assert exc_info.value.status_code == 408


class TestMutations:
    async def test_two_likes(self, repo: BlogRepository, make_blog) -> None:
        created = await make_blog("AI Basics")
        blog_id = str(created["_id"])
        await repo.like(blog_id)
        assert await repo.like(blog_id) == created["likes"] + 2

    async def test_like_missing(self, repo: BlogRepository) -> None:
        with pytest.raises(RecordNotFoundError):
            await repo.like(str(ObjectId()))

    async def test_delete_twice(self, repo: BlogRepository, make_blog) -> None:
        created = await make_blog("AI Basics")
        blog_id = str(created["_id"])
        deleted = await repo.delete(blog_id)
        assert deleted["slug"] == "ai-basics"
        with pytest.raises(RecordNotFoundError):
            await repo.delete(blog_id)
        with pytest.raises(RecordNotFoundError):
            await repo.get_by_id(blog_id)

    async def test_update_title_rederives_slug(self, repo: BlogRepository, make_blog) -> None:
        created = await make_blog("AI Basics", tags=["ai"])
        updated = await repo.update(str(created["_id"]), BlogUpdate(title="Advanced AI Topics"))
        assert updated["slug"] == "advanced-ai-topics"
        assert updated["tags"] == ["ai"]
        assert updated["content"] == created["content"]
        assert updated["updatedAt"] >= created["updatedAt"]
        assert updated["createdAt"] == created["createdAt"]

    async def test_update_without_title_keeps_slug(self, repo: BlogRepository, make_blog) -> None:
        created = await make_blog("AI Basics")
        updated = await repo.update(
            str(created["_id"]),
            BlogUpdate.model_validate({"featured": True, "tags": ["News", "AI"]}),
        )
        assert updated["slug"] == "ai-basics"
        assert updated["featured"] is True
        assert updated["tags"] == ["news", "ai"]

    async def test_update_ignores_counters(self, repo: BlogRepository, make_blog) -> None:
        created = await make_blog("AI Basics")
        updated = await repo.update(
            str(created["_id"]),
            BlogUpdate.model_validate({"views": 1000, "likes": 1000, "slug": "hacked"}),
        )
        assert updated["views"] == 0
        assert updated["likes"] == 0
        assert updated["slug"] == "ai-basics"

    async def test_update_to_existing_title(self, repo: BlogRepository, make_blog) -> None:
        await make_blog("AI Basics")
        other = await make_blog("Edge AI")
        with pytest.raises(DuplicateEntryError):
            await repo.update(str(other["_id"]), BlogUpdate(title="AI Basics"))

    async def test_update_missing(self, repo: BlogRepository) -> None:
        with pytest.raises(RecordNotFoundError):
            await repo.update(str(ObjectId()), BlogUpdate(featured=True))

    async def test_update_malformed_id(self, repo: BlogRepository) -> None:
        with pytest.raises(RecordNotFoundError):
            await repo.update("bad-id", BlogUpdate(featured=True))

    async def test_store_unreachable(self, repo: BlogRepository, collection: FakeCollection) -> None:
        collection.fail_with = ServerSelectionTimeoutError("No servers available")
        with pytest.raises(StoreUnavailableError) as exc_info:
            await repo.like(str(ObjectId()))
        assert exc_info.value.status_code == 503
