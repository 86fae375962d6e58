"""
Shared FastAPI dependencies for v1 API routes.

The long-lived collaborators are built once in the lifespan and kept on
``app.state``; tests swap them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.models.repository import PostRepository
from app.services.description_service import DescriptionService
from app.services.image_store import ImageStore
from app.services.post_assembly import PostAssembler


def get_post_repository(request: Request) -> PostRepository:
    return request.app.state.post_repository


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def get_description_service(request: Request) -> DescriptionService:
    return request.app.state.description_service


AppSettings = Annotated[Settings, Depends(get_settings)]
Posts = Annotated[PostRepository, Depends(get_post_repository)]
Images = Annotated[ImageStore, Depends(get_image_store)]
Describer = Annotated[DescriptionService, Depends(get_description_service)]


def get_post_assembler(
    repository: Posts, image_store: Images, describer: Describer, settings: AppSettings
) -> PostAssembler:
    return PostAssembler(
        repository,
        image_store,
        describer,
        summary_prompt=settings.summary_prompt,
        detail_prompt=settings.detail_prompt,
    )


Assembler = Annotated[PostAssembler, Depends(get_post_assembler)]
