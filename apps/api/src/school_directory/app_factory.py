"""
Application Factory

Builds the FastAPI application. Collaborators (database pool, email sender,
image storage) are created in the lifespan and stored on ``app.state``;
nothing is opened at import time.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from school_directory.api import api_router
from school_directory.core.config import Settings, get_settings
from school_directory.core.errors import register_exception_handlers
from school_directory.core.logging_config import setup_logging
from school_directory.core.services import AppServices

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Builds the service container at startup and releases the database
        pool at shutdown.
        """
        setup_logging(settings.log_level)
        logger.info(f"Starting School Directory API in {settings.python_env} mode...")

        services = AppServices.from_settings(settings)
        try:
            await services.startup()
        except Exception:
            logger.exception("[FAIL] Startup failed")
            await services.shutdown()
            raise

        app.state.services = services

        yield  # Application runs here

        logger.info("Shutting down School Directory API...")
        await services.shutdown()
        logger.info("[OK] Cleanup complete")

    app = FastAPI(
        title="School Directory API",
        description="School directory with image uploads and email one-time-code login",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app, expose_internal_errors=settings.is_development)

    app.include_router(api_router, prefix="/api")

    if not settings.use_object_storage:
        app.mount(
            settings.upload_url_prefix,
            StaticFiles(directory=settings.upload_dir, check_dir=False),
            name="school-images",
        )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {"status": "healthy"}

    return app
