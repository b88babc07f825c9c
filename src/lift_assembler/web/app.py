"""FastAPI application for the lift-assembler JSON API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .. import __version__
from ..config import Config
from ..db.engine import get_db_path, init_db
from .routers import exercises, programs


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    # Startup: Initialize database
    await init_db(app.state.db_path)
    yield


def create_app(config: Config | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config()

    app = FastAPI(
        title="lift-assembler",
        description="Deterministic training program assembly",
        version=__version__,
        lifespan=lifespan,
    )

    # Shared state for routers, catalog is loaded lazily
    app.state.config = config
    app.state.db_path = get_db_path(config.get_data_dir())
    app.state.catalog = None

    app.include_router(exercises.router)
    app.include_router(programs.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
