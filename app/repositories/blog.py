"""Blog repository for database operations."""

from logging import getLogger
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument

from app.configs import Settings, file_logger, settings
from app.errors.database import RecordNotFoundError, translate_store_errors
from app.errors.validation import ValidationError
from app.models.blog import BlogDocument, derive_slug, new_blog_document
from app.repositories.query import build_query
from app.schemas.blog import BlogCreate, BlogUpdate
from app.schemas.query import BlogListQuery
from app.utils.helpers import utc_now

logger = file_logger(getLogger(__name__))

type Document = dict[str, Any]


def to_object_id(blog_id: str) -> ObjectId:
    """
    Parse a client-supplied id.

    Raises:
        RecordNotFoundError: When the id is not a 24-hex ObjectId; a malformed id
            can never match a document.
    """
    if not ObjectId.is_valid(blog_id):
        raise RecordNotFoundError
    return ObjectId(blog_id)


def _validate_document(data: Document) -> BlogDocument:
    try:
        return BlogDocument.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


class BlogRepository:
    """
    Repository for Blog database operations.

    All durable state lives in the collection; counters are only ever changed with
    ``$inc`` so concurrent views and likes never lose increments.
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection[Document],
        config: Settings = settings,
    ) -> None:
        """
        Initialize repository with the blogs collection.

        Args:
            collection: Motor collection holding blog documents.
            config: Settings providing per-operation time budgets.
        """
        self.collection = collection
        self.config = config

    async def create(self, payload: BlogCreate) -> Document:
        """
        Create a new blog post.

        Args:
            payload: Validated creation payload.

        Returns:
            Document: Stored document including its ``_id``.

        Raises:
            ValidationError: If the assembled document is invalid (e.g. empty slug).
            DuplicateEntryError: If another post already has the derived slug.
        """
        now = utc_now()
        try:
            document = new_blog_document(payload.model_dump(exclude_none=True), now)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        data = document.to_mongo()
        with translate_store_errors("blog creation"):
            result = await self.collection.insert_one(data)

        logger.info(f"Blog created with slug '{document.slug}'")
        return {**data, "_id": result.inserted_id}

    async def _view(self, match: Document) -> Document:
        with translate_store_errors("blog lookup"):
            document = await self.collection.find_one_and_update(
                match,
                {"$inc": {"views": 1}},
                return_document=ReturnDocument.AFTER,
            )
        if document is None:
            raise RecordNotFoundError
        return document

    async def get_by_id(self, blog_id: str) -> Document:
        """
        Fetch a post by id and count the view.

        Returns:
            Document: The post after its ``views`` increment.

        Raises:
            RecordNotFoundError: Missing post or malformed id.
        """
        return await self._view({"_id": to_object_id(blog_id)})

    async def get_by_slug(self, slug: str) -> Document:
        """Fetch a post by slug and count the view."""
        return await self._view({"slug": slug})

    async def list(self, query: BlogListQuery) -> tuple[list[Document], int]:
        """
        List posts matching the filters, sorted and paginated.

        Args:
            query: Listing parameters.

        Returns:
            tuple[list[Document], int]: The requested page and the total match count.

        Raises:
            OperationTimeoutError: Listing or counting exceeded its time budget.
        """
        plan = build_query(query)
        with translate_store_errors("blog listing"):
            cursor = (
                self.collection.find(plan.filter)
                .sort(plan.sort)
                .skip(plan.skip)
                .limit(plan.limit)
                .max_time_ms(self.config.LIST_QUERY_TIMEOUT_MS)
            )
            documents = await cursor.to_list(length=plan.limit)
            total = await self.collection.count_documents(
                plan.filter,
                maxTimeMS=self.config.COUNT_QUERY_TIMEOUT_MS,
            )
        return documents, total

    async def update(self, blog_id: str, patch: BlogUpdate) -> Document:
        """
        Apply a partial update.

        The existing post is merged with the patch and the merge is validated as a
        whole before anything is written. Only patched fields, the re-derived slug
        (when the title changes) and ``updatedAt`` are ``$set``.

        Args:
            blog_id: Post id.
            patch: Fields sent by the client.

        Returns:
            Document: The post after the update.

        Raises:
            RecordNotFoundError: Missing post or malformed id.
            ValidationError: The merged document violates a field rule.
            DuplicateEntryError: The new title collides with another post's slug.
        """
        object_id = to_object_id(blog_id)
        with translate_store_errors("blog update"):
            existing = await self.collection.find_one({"_id": object_id})
        if existing is None:
            raise RecordNotFoundError

        changes = patch.to_patch()
        if "title" in changes:
            changes["slug"] = derive_slug(changes["title"])
        changes["updatedAt"] = utc_now()

        merged = {key: value for key, value in existing.items() if key != "_id"}
        validated = _validate_document({**merged, **changes}).to_mongo()
        update_set = {key: validated[key] for key in changes}

        with translate_store_errors("blog update"):
            document = await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": update_set},
                return_document=ReturnDocument.AFTER,
            )
        if document is None:
            raise RecordNotFoundError

        logger.info(f"Blog {blog_id} updated: {sorted(update_set)}")
        return document

    async def delete(self, blog_id: str) -> Document:
        """
        Delete a post permanently.

        Returns:
            Document: Snapshot of the deleted post.

        Raises:
            RecordNotFoundError: Missing post (including an already deleted one).
        """
        with translate_store_errors("blog deletion"):
            document = await self.collection.find_one_and_delete({"_id": to_object_id(blog_id)})
        if document is None:
            raise RecordNotFoundError

        logger.info(f"Blog {blog_id} deleted")
        return document

    async def like(self, blog_id: str) -> int:
        """Atomically increment the like counter and return its new value."""
        with translate_store_errors("blog like"):
            document = await self.collection.find_one_and_update(
                {"_id": to_object_id(blog_id)},
                {"$inc": {"likes": 1}},
                projection={"likes": True},
                return_document=ReturnDocument.AFTER,
            )
        if document is None:
            raise RecordNotFoundError
        return int(document["likes"])
