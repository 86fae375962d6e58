"""
Post endpoints.

GET    /posts/      list every post
GET    /posts/{id}  one post, or null when the id is unknown or malformed
POST   /posts/      create from a multipart upload
PUT    /posts/{id}  replace image and/or text fields
DELETE /posts       best-effort removal of every post and its image
DELETE /posts/{id}  remove one post and its image
"""

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from app.api.v1.deps import Assembler, Images, Posts
from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.security import limiter
from app.models.repository import is_valid_post_id
from app.schemas.schemas import (
    BulkDeleteFailure,
    BulkDeleteResponse,
    DeleteResponse,
    Post,
    PostSubmission,
    UploadedImage,
)
from app.services.image_store import extension_of
from app.services.post_assembly import ImageRequiredError

router = APIRouter(prefix="/posts", tags=["posts"])
logger = get_logger(__name__)
settings = get_settings()

REQUEST_FAILED = "Request failed."


def _failed(event: str, error: Exception, **context: object) -> HTTPException:
    logger.error(event, error=str(error), error_type=type(error).__name__, **context)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=REQUEST_FAILED)


async def _read_upload(upload: UploadFile | None) -> UploadedImage | None:
    if upload is None or not upload.filename:
        return None
    return UploadedImage(filename=upload.filename, data=await upload.read())


@router.get("/", response_model=list[Post])
@router.get("", response_model=list[Post], include_in_schema=False)
async def list_posts(repository: Posts) -> list[Post]:
    try:
        return await repository.list_posts()
    except Exception as e:
        raise _failed("list_posts_failed", e) from e


@router.get("/{post_id}", response_model=Post | None)
@router.get("/{post_id}/", response_model=Post | None, include_in_schema=False)
async def get_post(post_id: str, repository: Posts) -> Post | None:
    try:
        return await repository.get(post_id)
    except Exception as e:
        raise _failed("get_post_failed", e, post_id=post_id) from e


@router.post("/", response_model=Post)
@limiter.limit(settings.ai_rate_limit)
async def create_post(
    request: Request,
    repository: Posts,
    image_store: Images,
    assembler: Assembler,
    imagem: Annotated[UploadFile | None, File()] = None,
    descricao: Annotated[str | None, Form()] = None,
    alt: Annotated[str | None, Form()] = None,
) -> Post:
    """Create a post; missing descricao/alt are generated from the image."""
    submission = PostSubmission(image=await _read_upload(imagem), descricao=descricao, alt=alt)
    try:
        assembled = await assembler.assemble_new(submission)
    except ImageRequiredError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    temp_path: Path | None = None
    try:
        temp_path = await image_store.stage(submission.image.data)
        post_id = await repository.create(assembled.fields())
        await image_store.finalize(temp_path, post_id, extension_of(assembled.imagem))
    except Exception as e:
        if temp_path is not None:
            await image_store.discard(temp_path)
        raise _failed("create_post_failed", e, imagem=assembled.imagem) from e

    logger.info(
        "post_created",
        post_id=post_id,
        imagem=assembled.imagem,
        generated_descricao=not submission.descricao,
        generated_alt=not submission.alt,
    )
    return Post(id=post_id, **assembled.fields().model_dump())


@router.put("/{post_id}", response_model=Post | None)
@limiter.limit(settings.ai_rate_limit)
async def update_post(
    request: Request,
    post_id: str,
    repository: Posts,
    image_store: Images,
    assembler: Assembler,
    imagem: Annotated[UploadFile | None, File()] = None,
    descricao: Annotated[str | None, Form()] = None,
    alt: Annotated[str | None, Form()] = None,
    imagem_anterior: Annotated[str | None, Form(alias="imagemAnterior")] = None,
) -> Post | None:
    """Update a post. Responds null when the post does not exist."""
    if not post_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Post id is required.")

    uploaded = await _read_upload(imagem)
    submission = PostSubmission(
        image=uploaded, descricao=descricao, alt=alt, imagem_anterior=imagem_anterior
    )
    if uploaded is not None and not submission.imagem_anterior:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Previous image (imagemAnterior) is required when replacing the image.",
        )

    temp_path: Path | None = None
    placed = False
    matched = 0
    try:
        assembled = await assembler.assemble_update(post_id, submission)
        if assembled is None:
            return None

        new_extension = extension_of(assembled.imagem)
        old_extension = extension_of(assembled.imagem_anterior or assembled.imagem)

        # The new file is in place before the document points at it
        if uploaded is not None:
            temp_path = await image_store.stage(uploaded.data)
            await image_store.finalize(temp_path, post_id, new_extension)
            temp_path = None
            placed = True

        matched = await repository.update(post_id, assembled.fields())
        if not matched:
            logger.info("update_post_not_found", post_id=post_id)
            if placed:
                await image_store.delete(post_id, new_extension)
            return None

        if placed and old_extension != new_extension:
            await image_store.delete(post_id, old_extension)
    except Exception as e:
        if temp_path is not None:
            await image_store.discard(temp_path)
        elif placed and not matched and old_extension != new_extension:
            await image_store.delete(post_id, new_extension)
        raise _failed("update_post_failed", e, post_id=post_id) from e

    logger.info("post_updated", post_id=post_id, image_replaced=uploaded is not None)
    return Post(id=post_id, **assembled.fields().model_dump())


@router.delete("", response_model=BulkDeleteResponse)
async def delete_all_posts(repository: Posts, image_store: Images) -> BulkDeleteResponse:
    """Delete every post one by one. Not atomic: failures are reported per post."""
    try:
        posts = await repository.list_posts()
    except Exception as e:
        raise _failed("delete_all_posts_failed", e) from e

    result = BulkDeleteResponse(total=len(posts))
    for post in posts:
        try:
            await image_store.delete(post.id, extension_of(post.imagem))
            outcome = await repository.delete(post.id)
        except Exception as e:
            logger.error("post_delete_failed", post_id=post.id, error=str(e))
            result.failures.append(BulkDeleteFailure(id=post.id, error=REQUEST_FAILED))
            continue

        if outcome.deleted_count:
            result.deleted += 1
            logger.info("post_deleted", post_id=post.id)
        else:
            result.failures.append(BulkDeleteFailure(id=post.id, error="Post not found."))

    logger.info("posts_bulk_deleted", total=result.total, deleted=result.deleted)
    return result


@router.delete("/{post_id}", response_model=DeleteResponse)
async def delete_post(post_id: str, repository: Posts, image_store: Images) -> DeleteResponse:
    try:
        outcome = await repository.delete(post_id)
        if is_valid_post_id(post_id):
            await image_store.delete(post_id, outcome.img_extension)
    except Exception as e:
        raise _failed("delete_post_failed", e, post_id=post_id) from e

    logger.info("post_delete_processed", post_id=post_id, deleted=outcome.deleted_count)
    return outcome
