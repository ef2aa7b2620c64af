"""
Draft Sync API - Main Application

FastAPI application exposing a read-only view of a live draft room.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from draft_sync import __version__
from draft_sync.api.dependencies import RoomManager
from draft_sync.api.routes import draft
from draft_sync.config import get_settings
from draft_sync.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    settings = get_settings()
    logger.info("Starting Draft Sync API v%s", __version__)
    logger.info("Draft server: %s", settings.api_base_url)
    if RoomManager.get_room() is None:
        await RoomManager.open_default(settings)

    yield

    # Shutdown
    logger.info("Shutting down Draft Sync API")
    await RoomManager.close()


def create_app() -> FastAPI:
    """Application factory to create the FastAPI app."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        room = RoomManager.get_room()
        return {
            "status": "healthy",
            "version": __version__,
            "connection": room.connection_status.value if room else None,
        }

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.api_title,
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "state": "/api/draft/state",
                "players": "/api/draft/players",
                "categories": "/api/draft/categories",
                "picks": "/api/draft/picks",
                "events": "/api/draft/events",
            },
        }

    # Register API routes
    app.include_router(draft.router, prefix="/api/draft", tags=["Draft"])

    return app


# Create the application instance
app = create_app()


def run():
    """Run the application (used by the CLI entry point)."""
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "draft_sync.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    run()
