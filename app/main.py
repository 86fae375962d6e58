"""
FastAPI application entry point.

Configures middleware, lifespan events, and mounts all routers.
Run locally: posts-api  (or: uvicorn app.main:app --reload --port 3000)
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.v1.routes import clusters, frontend, health, posts
from app.core.config import get_settings
from app.core.logging import get_logger, setup_logging
from app.core.security import limiter
from app.models.database import connect, disconnect
from app.models.repository import PostRepository
from app.services.description_service import DescriptionService, build_description_llm
from app.services.image_store import ImageStore

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown events."""
    setup_logging()
    logger.info(
        "app_starting",
        environment=settings.app_env,
        database=settings.mongodb_database,
        collection=settings.mongodb_collection,
        port=settings.port,
        cors_origin=settings.cors_origin,
    )

    client = await connect(settings)
    app.state.post_repository = PostRepository(
        client, settings.mongodb_database, settings.mongodb_collection
    )
    app.state.image_store = ImageStore(settings.upload_dir)
    app.state.description_service = DescriptionService(
        build_description_llm(settings), fallback=settings.description_fallback
    )

    yield

    logger.info("app_shutting_down")
    await disconnect(client)


app = FastAPI(
    title="Image Posts API",
    description="Image posts with AI-generated descriptions and alt-text",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.app_env != "production" else None,
    redoc_url="/redoc" if settings.app_env != "production" else None,
)

# ── Middleware ──────────────────────────────────────────────
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Rate limiting ──────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ── Routes (frontend fallback last: it claims every GET) ───
app.include_router(health.router)
app.include_router(clusters.router)
app.include_router(posts.router)
app.include_router(frontend.router)


def run() -> None:
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
