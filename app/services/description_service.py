"""
Image description service: Gemini multimodal text generation.

Used to fill in a post's description and alt-text when the client omits them.
Failures never reach the caller: any error or empty reply degrades to the
configured fallback text.
"""

from __future__ import annotations

import base64
import mimetypes
from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from app.core.logging import get_logger

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from app.core.config import Settings

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "image/png"


def build_description_llm(settings: Settings) -> ChatGoogleGenerativeAI:
    return ChatGoogleGenerativeAI(
        model=settings.model_describer,
        temperature=0.2,
        google_api_key=settings.google_api_key,
    )


def guess_mime_type(filename: str | None) -> str:
    if filename:
        mime, _ = mimetypes.guess_type(filename)
        if mime and mime.startswith("image/"):
            return mime
    return DEFAULT_MIME_TYPE


def _reply_text(content: str | list) -> str:
    if isinstance(content, str):
        return content.strip()
    # Multimodal replies arrive as a list of parts
    parts: list[str] = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict):
            parts.append(part.get("text", ""))
    return "".join(parts).strip()


class DescriptionService:
    def __init__(self, llm: BaseChatModel, fallback: str) -> None:
        self.llm = llm
        self.fallback = fallback

    async def describe(self, data: bytes, prompt: str, filename: str | None = None) -> str:
        """Ask the model to describe ``data`` following ``prompt``."""
        mime_type = guess_mime_type(filename)
        encoded = base64.b64encode(data).decode("ascii")
        message = HumanMessage(
            content=[
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}},
            ]
        )

        try:
            response = await self.llm.ainvoke([message])
        except Exception as e:
            logger.error("description_failed", error=str(e), mime_type=mime_type)
            return self.fallback

        text = _reply_text(response.content)
        if not text:
            logger.warning("description_empty", mime_type=mime_type)
            return self.fallback

        logger.info("description_generated", char_count=len(text), image_bytes=len(data))
        return text
