"""Router registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.staticfiles import StaticFiles

from clipstream.features.comments.router import router as comments_router
from clipstream.features.follows.router import router as follows_router
from clipstream.features.health.router import router as health_router
from clipstream.features.users.router import router as users_router
from clipstream.features.videos.router import router as videos_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from clipstream.core.settings import AppSettings, StorageSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings) -> None:
    """Register every feature router under the API prefix."""
    api_prefix = app_settings.api_prefix

    app.include_router(health_router)
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(follows_router, prefix=api_prefix)
    app.include_router(videos_router, prefix=api_prefix)
    app.include_router(comments_router, prefix=api_prefix)
    logger.info("Routers registered", extra={"api_prefix": api_prefix})


def mount_uploads(app: FastAPI, storage_settings: StorageSettings) -> None:
    """Serve local-backend files as static content.

    The directory may not exist before the first upload, so it is not
    checked at mount time.
    """
    if storage_settings.backend != "local":
        return
    app.mount(
        storage_settings.local_mount_path,
        StaticFiles(directory=storage_settings.local_root, check_dir=False),
        name="uploads",
    )


__all__ = ["mount_uploads", "setup_routers"]
