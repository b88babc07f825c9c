"""Structural consistency check for assembled programs."""

import click

from ..models.program import WorkoutWeek
from ..services.diff_patcher import validate_weeks_consistency
from .base import echo_error, echo_success, read_json_file


@click.command()
@click.argument("program_path", type=click.Path())
@click.pass_context
def validate(ctx, program_path: str):
    """Check that every week of a program matches Week 1's structure.

    PROGRAM_PATH is a program JSON file as written by 'assemble --output'.
    Exits with status 1 if any week drifted from the template.
    """
    data = read_json_file(ctx, program_path, "program")

    try:
        weeks = [WorkoutWeek.from_dict(week) for week in data["weeks"]]
    except (KeyError, TypeError, ValueError) as e:
        echo_error(f"Invalid program file: {e}")
        ctx.exit(1)

    report = validate_weeks_consistency(weeks)
    if report.valid:
        echo_success(f"{len(weeks)} weeks share Week 1's structure")
        return

    for error in report.errors:
        echo_error(error)
    ctx.exit(1)
