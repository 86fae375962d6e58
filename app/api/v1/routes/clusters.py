"""Administrative listing of the databases and collections on the server."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.api.v1.deps import Posts
from app.core.logging import get_logger

router = APIRouter(tags=["admin"])
logger = get_logger(__name__)


@router.get("/clusters/", response_model=dict[str, list[str]])
@router.get("/clusters", response_model=dict[str, list[str]], include_in_schema=False)
async def list_clusters(repository: Posts) -> dict[str, list[str]]:
    try:
        return await repository.list_clusters()
    except Exception as e:
        logger.error("list_clusters_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Request failed."
        ) from e
