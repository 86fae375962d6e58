"""Constants and doubles shared by the test modules."""

from __future__ import annotations

from bson import ObjectId
from fastapi.testclient import TestClient

from app.schemas.schemas import DeleteResponse, Post, PostFields
from app.services.image_store import extension_of

FALLBACK = "Auto descrição indisponível."
GENERATED_SUMMARY = "Um gato laranja dormindo."
GENERATED_DETAIL = "Um gato laranja dormindo sobre uma almofada azul perto da janela."
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class InMemoryPostRepository:
    """Stands in for PostRepository in API tests."""

    def __init__(self) -> None:
        self.documents: dict[str, dict] = {}

    async def ping(self) -> None:
        return None

    async def list_clusters(self) -> dict[str, list[str]]:
        return {"admin": [], "imersao-instabytes": ["posts"]}

    async def list_posts(self) -> list[Post]:
        return [Post(id=post_id, **doc) for post_id, doc in self.documents.items()]

    async def get(self, post_id: str) -> Post | None:
        doc = self.documents.get(post_id)
        return Post(id=post_id, **doc) if doc else None

    async def create(self, fields: PostFields) -> str:
        post_id = str(ObjectId())
        self.documents[post_id] = fields.model_dump()
        return post_id

    async def update(self, post_id: str, fields: PostFields) -> int:
        if post_id not in self.documents:
            return 0
        self.documents[post_id] = fields.model_dump()
        return 1

    async def delete(self, post_id: str) -> DeleteResponse:
        doc = self.documents.pop(post_id, None)
        if doc is None:
            return DeleteResponse(deleted_count=0, img_extension=None)
        return DeleteResponse(deleted_count=1, img_extension=extension_of(doc["imagem"]) or None)


def create_post(client: TestClient, filename: str = "cat.png", **fields: str):
    return client.post(
        "/posts/",
        files={"imagem": (filename, PNG_BYTES, "image/png")},
        data=fields,
    )
