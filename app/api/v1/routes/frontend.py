"""
Static fallback for every GET the API routes do not claim.

Stored images are served by name (``/<id>.<ext>``), then files from the public
directory, and anything else gets the single-page ``index.html``.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from app.api.v1.deps import AppSettings, Images
from app.services.image_store import resolve_within

router = APIRouter(include_in_schema=False)


@router.get("/")
@router.get("/{path:path}")
async def frontend_fallback(
    settings: AppSettings, image_store: Images, path: str = ""
) -> FileResponse:
    found = image_store.resolve_public(path) or resolve_within(settings.public_dir, path)
    if found is None:
        found = settings.public_dir / "index.html"
        if not found.is_file():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")
    return FileResponse(found)
