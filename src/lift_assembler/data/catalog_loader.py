"""Exercise catalog loader from JSON."""

import json
import logging
from pathlib import Path

from ..models.exercises import CatalogExercise

log = logging.getLogger(__name__)


def get_catalog_json_path(data_dir: Path) -> Path:
    """Get the path of the default catalog file inside a data directory."""
    return data_dir / "exercise_catalog.json"


def parse_catalog(data: list | dict) -> list[CatalogExercise]:
    """Parse catalog entries from decoded JSON.

    Accepts either a list of entries or ``{"exercises": [...]}``. Invalid
    entries are skipped with a warning.

    Raises:
        ValueError: If the data is neither a list nor an object holding one
    """
    entries = data.get("exercises", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ValueError(
            f"Catalog must be a list of exercises, got {type(entries).__name__}"
        )

    catalog = []
    for entry in entries:
        try:
            catalog.append(CatalogExercise.from_dict(entry))
        except (KeyError, TypeError, AttributeError) as e:
            name = entry.get("name", "unknown") if isinstance(entry, dict) else "unknown"
            log.warning("Skipping invalid catalog entry %s: %s", name, e)
            continue

    return catalog


def load_catalog(path: Path) -> list[CatalogExercise]:
    """Load the exercise catalog from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
        ValueError: If the file does not hold a catalog
    """
    with open(path) as f:
        data = json.load(f)

    catalog = parse_catalog(data)
    log.info("Loaded %d catalog exercises from %s", len(catalog), path)
    return catalog
