"""Application lifespan: logging, database and storage startup/shutdown."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from clipstream.core.settings import get_app_settings, get_db_settings
from clipstream.infra.database import close_database, init_database
from clipstream.infra.logging import setup_logging
from clipstream.infra.logging import shutdown as shutdown_logging
from clipstream.infra.storage import get_storage_service, reset_storage_service

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start services in dependency order and stop them in reverse."""
    setup_logging()
    app_settings = get_app_settings()
    db_settings = get_db_settings()
    logger.info(
        "Starting application",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
        },
    )

    if db_settings.enabled:
        await init_database()

    storage = get_storage_service()
    await storage.startup()
    app.state.storage = storage

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await storage.shutdown()
        reset_storage_service()
        if db_settings.enabled:
            await close_database()
        shutdown_logging()


__all__ = ["lifespan"]
