"""
Image store: the flat upload directory holding one file per post.

Files are named ``<post_id>.<extension>``. Uploads are first staged under a
random name, then renamed once the post id is known.
"""

from __future__ import annotations

import uuid
from pathlib import Path

import aiofiles
import aiofiles.os

from app.core.logging import get_logger

logger = get_logger(__name__)


def extension_of(filename: str) -> str:
    """Return the suffix of ``filename`` without the dot ("" when there is none)."""
    return Path(filename).suffix.lstrip(".")


class ImageStore:
    def __init__(self, root: Path | str = "uploads") -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, post_id: str, extension: str | None) -> Path:
        name = f"{post_id}.{extension}" if extension else post_id
        return self.root / name

    async def stage(self, data: bytes) -> Path:
        """Write an upload to a temporary file and return its path."""
        temp_path = self.root / uuid.uuid4().hex
        async with aiofiles.open(temp_path, "wb") as f:
            await f.write(data)
        return temp_path

    async def finalize(self, temp_path: Path, post_id: str, extension: str | None) -> Path:
        target = self.path_for(post_id, extension)
        await aiofiles.os.replace(temp_path, target)
        logger.info("image_stored", post_id=post_id, path=str(target))
        return target

    async def discard(self, temp_path: Path) -> None:
        try:
            await aiofiles.os.remove(temp_path)
        except FileNotFoundError:
            return
        logger.info("staged_image_discarded", path=str(temp_path))

    async def read(self, post_id: str, extension: str | None) -> bytes | None:
        path = self.path_for(post_id, extension)
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            logger.warning("image_not_found", post_id=post_id, path=str(path))
            return None

    async def delete(self, post_id: str, extension: str | None) -> bool:
        """Remove a post's image. A missing file is logged and ignored."""
        path = self.path_for(post_id, extension)
        # Another request may remove the same file concurrently
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.info("image_not_found", post_id=post_id, path=str(path))
            return False
        logger.info("image_deleted", post_id=post_id, path=str(path))
        return True

    def resolve_public(self, relative: str) -> Path | None:
        """Map a URL path to a stored file, refusing anything outside the store."""
        return resolve_within(self.root, relative)


def resolve_within(root: Path, relative: str) -> Path | None:
    if not relative:
        return None
    base = root.resolve()
    candidate = (base / relative).resolve()
    if not candidate.is_relative_to(base) or not candidate.is_file():
        return None
    return candidate
