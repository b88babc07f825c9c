"""Exercise matching command."""

import json

import click

from ..utils.exercise_matcher import CatalogEmptyError, ExerciseMatcher
from .base import echo_error, echo_warning, resolve_catalog


@click.command()
@click.argument("name")
@click.option("--id", "exercise_id", help="Exercise ID that came with the name")
@click.option("--category", help="Category hint for fallback matching")
@click.option(
    "--muscle",
    "muscles",
    multiple=True,
    help="Target muscle hint for fallback matching (repeatable)",
)
@click.option("--catalog", "catalog_path", type=click.Path(), help="Exercise catalog JSON")
@click.option("--json", "as_json", is_flag=True, help="Print the match result as JSON")
@click.pass_context
def match(ctx, name: str, exercise_id, category, muscles, catalog_path, as_json: bool):
    """Resolve an exercise name (and optional ID) against the catalog.

    Examples:

        # Fuzzy match a misspelled name
        lift-assembler match "Barbell Bench Pres" --catalog catalog.json

        # Check a generated ID, falling back to chest exercises
        lift-assembler match "Mystery Press" --id ex_999 --muscle chest
    """
    catalog = resolve_catalog(ctx, catalog_path)
    matcher = ExerciseMatcher(catalog)

    try:
        result = matcher.match(name, exercise_id, category, list(muscles) or None)
    except CatalogEmptyError as e:
        echo_error(str(e))
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(f"{result.exercise_name} ({result.exercise_id})")
    click.echo(f"  match type: {result.match_type.value}")
    click.echo(f"  confidence: {result.confidence:.2f}")
    if result.was_correction:
        echo_warning(f"Reference corrected from {exercise_id or name!r}")
