"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from clipstream.app.exception_handlers import configure_exception_handlers
from clipstream.app.lifespan import lifespan
from clipstream.app.middleware import configure_middleware
from clipstream.app.router import mount_uploads, setup_routers
from clipstream.core.settings import (
    get_app_settings,
    get_logging_settings,
    get_storage_settings,
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Settings are read through the cached loaders, so tests clear the
    caches before calling this with a different environment.
    """
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        docs_url=app_settings.get_docs_url(),
        redoc_url=None,
        openapi_url=app_settings.get_openapi_url(),
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    configure_exception_handlers(app)
    configure_middleware(app, app_settings, get_logging_settings())
    setup_routers(app, app_settings)
    mount_uploads(app, get_storage_settings())
    return app


# Application instance for uvicorn
app = create_app()
