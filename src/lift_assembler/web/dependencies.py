"""Request-scoped accessors for shared app state."""

import logging

from fastapi import Request

from ..config import Config
from ..data import get_catalog_json_path, load_catalog
from ..db.repositories import ProgramRepository
from ..models.exercises import CatalogExercise

log = logging.getLogger(__name__)


def get_config(request: Request) -> Config:
    """Get the config from app state."""
    return request.app.state.config


def get_repository(request: Request) -> ProgramRepository:
    """Get a repository bound to the app's database."""
    return ProgramRepository(request.app.state.db_path)


def get_catalog(request: Request) -> list[CatalogExercise]:
    """Get the configured catalog, loading it on first use.

    A missing or unreadable catalog file yields an empty catalog; callers
    reject requests that need one.
    """
    state = request.app.state
    if state.catalog is None:
        config = state.config
        path = config.get_catalog_path() or get_catalog_json_path(config.get_data_dir())
        try:
            state.catalog = load_catalog(path)
        except (OSError, ValueError) as e:
            log.warning("Exercise catalog unavailable at %s: %s", path, e)
            return []
    return state.catalog
