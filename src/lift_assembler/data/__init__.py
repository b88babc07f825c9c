"""Data loading utilities."""

from .catalog_loader import get_catalog_json_path, load_catalog, parse_catalog

__all__ = ["get_catalog_json_path", "load_catalog", "parse_catalog"]
