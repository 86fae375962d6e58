"""
MongoDB client lifecycle.

A single AsyncMongoClient is created in the application lifespan, handed to
the repository, and closed on shutdown. Nothing here is module-global.
"""

from __future__ import annotations

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from app.core.config import Settings
from app.core.logging import get_logger

logger = get_logger(__name__)


async def connect(settings: Settings) -> AsyncMongoClient:
    """Open a client and verify the server answers before serving traffic."""
    client: AsyncMongoClient = AsyncMongoClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
    )
    logger.info("database_connecting", database=settings.mongodb_database)
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.error("database_connection_failed", error=str(e))
        await client.close()
        raise
    logger.info("database_connected", database=settings.mongodb_database)
    return client


async def disconnect(client: AsyncMongoClient) -> None:
    await client.close()
    logger.info("database_disconnected")
