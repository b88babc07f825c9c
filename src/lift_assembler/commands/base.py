"""Shared CLI utilities."""

import asyncio
import json
from functools import wraps
from pathlib import Path

import click

from ..config import Config
from ..data import get_catalog_json_path, load_catalog
from ..db import get_db_path
from ..models.exercises import CatalogExercise


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_config(ctx: click.Context) -> Config:
    """Get the Config stored on the root context."""
    root = ctx.find_root()
    if not isinstance(root.obj, Config):
        root.obj = Config()
    return root.obj


def get_data_dir(ctx: click.Context) -> Path:
    """Get the data directory path."""
    return get_config(ctx).get_data_dir()


def ensure_initialized(ctx: click.Context) -> Path:
    """Ensure the database is initialized and return its path."""
    db_path = get_db_path(get_data_dir(ctx))
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'lift-assembler init' first."
        )
        ctx.exit(1)
    return db_path


def read_json_file(ctx: click.Context, path: str, label: str) -> dict | list:
    """Read a JSON input file, exiting with an error message on failure."""
    try:
        with open(path) as f:
            return json.load(f)
    except OSError as e:
        echo_error(f"Cannot read {label} file {path}: {e}")
        ctx.exit(1)
    except json.JSONDecodeError as e:
        echo_error(f"{label.capitalize()} file {path} is not valid JSON: {e}")
        ctx.exit(1)


def resolve_catalog(ctx: click.Context, catalog_path: str | None) -> list[CatalogExercise]:
    """Load the catalog from the option, the config, or the data directory."""
    if catalog_path:
        path = Path(catalog_path)
    else:
        path = get_config(ctx).get_catalog_path() or get_catalog_json_path(get_data_dir(ctx))

    try:
        return load_catalog(path)
    except FileNotFoundError:
        echo_error(f"Exercise catalog not found: {path}")
        ctx.exit(1)
    except json.JSONDecodeError as e:
        echo_error(f"Exercise catalog {path} is not valid JSON: {e}")
        ctx.exit(1)
    except ValueError as e:
        echo_error(f"Invalid exercise catalog {path}: {e}")
        ctx.exit(1)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = []
    lines.append("".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)))
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(lines)
