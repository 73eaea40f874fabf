"""FastAPI application factory."""

from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workflow_editor import __version__
from workflow_editor.api.rest.router import router
from workflow_editor.config import Settings, get_settings
from workflow_editor.utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the REST application around the conversion router."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_json)

    app = FastAPI(
        title=settings.app_name,
        description="Conversion endpoints for the visual workflow editor",
        version=__version__,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health")
    async def health_check():
        return {"status": "healthy", "version": __version__, "environment": settings.environment}

    logger.info("api_created", prefix=settings.api_prefix, environment=settings.environment)
    return app
