"""
Pydantic v2 schemas for API request/response validation.

Post field names (imagem, descricao, alt, imagemAnterior) are the public wire
format and are kept as-is; Python attribute names stay snake_case.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Posts ───────────────────────────────────────────────────
class PostFields(BaseModel):
    """The field set persisted for every post."""

    imagem: str
    descricao: str
    alt: str


class Post(PostFields):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    imagem: str = ""
    descricao: str = ""
    alt: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v


class AssembledPost(PostFields):
    """Fields computed for a create/update request.

    ``imagem_anterior`` is set only when the post already had an image, so the
    caller knows an old file may need to be removed.
    """

    model_config = ConfigDict(populate_by_name=True)

    imagem_anterior: str | None = Field(default=None, alias="imagemAnterior")

    def fields(self) -> PostFields:
        return PostFields(imagem=self.imagem, descricao=self.descricao, alt=self.alt)


class UploadedImage(BaseModel):
    filename: str
    data: bytes


class PostSubmission(BaseModel):
    """Everything a create/update request carries, after form parsing."""

    image: UploadedImage | None = None
    descricao: str | None = None
    alt: str | None = None
    imagem_anterior: str | None = None

    @field_validator("descricao", "alt", "imagem_anterior", mode="before")
    @classmethod
    def blank_as_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


# ── Deletion ────────────────────────────────────────────────
class DeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deleted_count: int = Field(default=0, alias="deletedCount")
    img_extension: str | None = Field(default=None, alias="imgExtension")


class BulkDeleteFailure(BaseModel):
    id: str
    error: str


class BulkDeleteResponse(BaseModel):
    total: int = 0
    deleted: int = 0
    failures: list[BulkDeleteFailure] = Field(default_factory=list)


# ── Health check ────────────────────────────────────────────
class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str = "0.1.0"
    environment: str
    database: str = "connected"
