"""
Post repository: CRUD against the posts collection.

String ids from the URL are parsed into ObjectIds with ``parse_post_id``;
each method decides what an unparseable id means (here: "no such post").
"""

from __future__ import annotations

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import AsyncMongoClient

from app.core.logging import get_logger
from app.schemas.schemas import DeleteResponse, Post, PostFields
from app.services.image_store import extension_of

logger = get_logger(__name__)


class InvalidPostIdError(ValueError):
    """Raised when a string is not a valid 24-char hex ObjectId."""


def is_valid_post_id(raw: str) -> bool:
    return ObjectId.is_valid(raw)


def parse_post_id(raw: str) -> ObjectId:
    try:
        return ObjectId(raw)
    except (InvalidId, TypeError) as e:
        raise InvalidPostIdError(f"Invalid post id: {raw!r}") from e


class PostRepository:
    def __init__(self, client: AsyncMongoClient, database: str, collection: str) -> None:
        self.client = client
        self.database = database
        self.collection_name = collection
        self.collection = client[database][collection]

    async def ping(self) -> None:
        await self.client.admin.command("ping")

    async def list_clusters(self) -> dict[str, list[str]]:
        """Map every database on the server to its collection names."""
        clusters: dict[str, list[str]] = {}
        for name in await self.client.list_database_names():
            clusters[name] = await self.client[name].list_collection_names()
        return clusters

    async def list_posts(self) -> list[Post]:
        documents = await self.collection.find().to_list(None)
        return [Post.model_validate(doc) for doc in documents]

    async def get(self, post_id: str) -> Post | None:
        try:
            oid = parse_post_id(post_id)
        except InvalidPostIdError:
            return None
        doc = await self.collection.find_one({"_id": oid})
        return Post.model_validate(doc) if doc else None

    async def create(self, fields: PostFields) -> str:
        result = await self.collection.insert_one(fields.model_dump())
        logger.info("post_inserted", post_id=str(result.inserted_id))
        return str(result.inserted_id)

    async def update(self, post_id: str, fields: PostFields) -> int:
        """Replace imagem/descricao/alt. Returns the matched count."""
        try:
            oid = parse_post_id(post_id)
        except InvalidPostIdError:
            return 0
        result = await self.collection.update_one({"_id": oid}, {"$set": fields.model_dump()})
        return result.matched_count

    async def delete(self, post_id: str) -> DeleteResponse:
        """Delete one post, reporting the extension of the image it referenced."""
        try:
            oid = parse_post_id(post_id)
        except InvalidPostIdError:
            return DeleteResponse(deleted_count=0, img_extension=None)

        doc = await self.collection.find_one({"_id": oid})
        extension = None
        if doc and doc.get("imagem"):
            extension = extension_of(doc["imagem"]) or None
            logger.debug("post_image_captured", post_id=post_id, imagem=doc["imagem"])

        result = await self.collection.delete_one({"_id": oid})
        return DeleteResponse(
            deleted_count=result.deleted_count,
            img_extension=extension,
        )
