"""
Post assembly: decide the final imagem/descricao/alt of a create or update.

Rules for each text field, in order:
  1. the value the client sent
  2. AI-generated text, when image bytes are available
  3. the value already stored on the post (updates only)
  4. the fallback text
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.core.logging import get_logger
from app.schemas.schemas import AssembledPost, Post, PostSubmission
from app.services.image_store import extension_of

if TYPE_CHECKING:
    from app.models.repository import PostRepository
    from app.services.description_service import DescriptionService
    from app.services.image_store import ImageStore

logger = get_logger(__name__)


class ImageRequiredError(ValueError):
    """A new post was submitted without an image file."""

    def __init__(self) -> None:
        super().__init__("Image is required.")


class PostAssembler:
    def __init__(
        self,
        repository: PostRepository,
        image_store: ImageStore,
        describer: DescriptionService,
        summary_prompt: str,
        detail_prompt: str,
    ) -> None:
        self.repository = repository
        self.image_store = image_store
        self.describer = describer
        self.summary_prompt = summary_prompt
        self.detail_prompt = detail_prompt

    async def assemble_new(self, submission: PostSubmission) -> AssembledPost:
        if submission.image is None:
            raise ImageRequiredError()

        image = submission.image
        descricao = submission.descricao or await self.describer.describe(
            image.data, self.summary_prompt, image.filename
        )
        alt = submission.alt or await self.describer.describe(
            image.data, self.detail_prompt, image.filename
        )
        return AssembledPost(imagem=image.filename, descricao=descricao, alt=alt)

    async def assemble_update(
        self, post_id: str, submission: PostSubmission
    ) -> AssembledPost | None:
        """Compute the fields for an update.

        Returns None when there is neither a new image nor an existing post,
        i.e. nothing that could be saved.
        """
        previous = await self.repository.get(post_id)
        stored_image = _stored_image(previous)

        if submission.image is not None:
            imagem = submission.image.filename
            data: bytes | None = submission.image.data
            imagem_anterior = stored_image or submission.imagem_anterior
        elif previous is not None:
            imagem = previous.imagem
            imagem_anterior = stored_image
            data = None
            if not submission.descricao and not submission.alt:
                data = await self.image_store.read(post_id, extension_of(previous.imagem))
        else:
            logger.info("update_target_missing", post_id=post_id)
            return None

        stored_descricao = previous.descricao if previous else None
        stored_alt = previous.alt if previous else None
        descricao = await self._resolve(
            submission.descricao, data, self.summary_prompt, imagem, stored_descricao
        )
        alt = await self._resolve(submission.alt, data, self.detail_prompt, imagem, stored_alt)
        return AssembledPost(
            imagem=imagem, descricao=descricao, alt=alt, imagem_anterior=imagem_anterior
        )

    async def _resolve(
        self,
        provided: str | None,
        data: bytes | None,
        prompt: str,
        filename: str,
        stored: str | None,
    ) -> str:
        if provided:
            return provided
        if data:
            return await self.describer.describe(data, prompt, filename)
        return stored or self.describer.fallback


def _stored_image(post: Post | None) -> str | None:
    return post.imagem if post and post.imagem else None
