"""Program assembly command."""

import json

import click

from ..db import ProgramRepository, get_db_path, init_db
from ..models.program import PrimaryGoal, ProgressionDiffs, SplitType, WorkoutWeek
from ..services.diff_patcher import StaleDiffError
from ..services.one_rep_max import apply_one_rep_max_weights, one_rep_max_map
from ..services.program_assembler import AssemblyRequest, ProgramAssembler
from ..utils.exercise_matcher import CatalogEmptyError
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    get_config,
    read_json_file,
    resolve_catalog,
)


@click.command()
@click.option("--template", "-t", "template_path", required=True, type=click.Path(),
              help="Week 1 template JSON")
@click.option("--diffs", "-d", "diffs_path", type=click.Path(),
              help="Progression diffs JSON ({\"week2\": {...}, ...})")
@click.option("--weeks", "-w", "duration_weeks", required=True, type=click.IntRange(min=1),
              help="Program duration in weeks")
@click.option("--catalog", "catalog_path", type=click.Path(), help="Exercise catalog JSON")
@click.option("--name", "-n", default="Generated Program", help="Program name")
@click.option("--description", default="", help="Program description")
@click.option("--user", "user_id", default="", help="Owner user id")
@click.option("--split", "split_type", type=click.Choice([s.value for s in SplitType]),
              default=SplitType.CUSTOM.value, help="Training split")
@click.option("--goal", "primary_goal", type=click.Choice([g.value for g in PrimaryGoal]),
              default=PrimaryGoal.GENERAL_FITNESS.value, help="Primary goal")
@click.option("--one-rep-max", "one_rep_max_path", type=click.Path(),
              help="JSON list of {exerciseId, oneRepMax} used to compute loads")
@click.option("--strict", is_flag=True, help="Abort if diffs were computed against another template")
@click.option("--save", is_flag=True, help="Store the program in the program store")
@click.option("--output", "-o", type=click.Path(), help="Write program JSON to a file")
@click.pass_context
@async_command
async def assemble(
    ctx,
    template_path: str,
    diffs_path: str | None,
    duration_weeks: int,
    catalog_path: str | None,
    name: str,
    description: str,
    user_id: str,
    split_type: str,
    primary_goal: str,
    one_rep_max_path: str | None,
    strict: bool,
    save: bool,
    output: str | None,
):
    """Assemble a multi-week program from a Week 1 template and diffs.

    Week 1 is validated against the exercise catalog, then cloned once per
    week with that week's diff applied.

    Examples:

        lift-assembler assemble -t week1.json -d diffs.json -w 4 --catalog catalog.json

        lift-assembler assemble -t week1.json -d diffs.json -w 4 --save -o program.json
    """
    config = get_config(ctx)
    catalog = resolve_catalog(ctx, catalog_path)

    template_data = read_json_file(ctx, template_path, "template")
    diffs_data = read_json_file(ctx, diffs_path, "diffs") if diffs_path else {}

    try:
        request = AssemblyRequest(
            week1=WorkoutWeek.from_dict(template_data),
            progression_diffs=ProgressionDiffs.from_dict(diffs_data),
            duration_weeks=duration_weeks,
            name=name,
            description=description,
            user_id=user_id,
            split_type=SplitType(split_type),
            primary_goal=PrimaryGoal(primary_goal),
        )
    except (KeyError, TypeError, ValueError) as e:
        echo_error(f"Invalid template or diffs: {e}")
        ctx.exit(1)

    try:
        phase_policy = config.phase_policy()
    except ValueError as e:
        echo_error(f"Invalid phase tables in configuration: {e}")
        ctx.exit(1)

    assembler = ProgramAssembler(
        catalog,
        phase_policy=phase_policy,
        periodization_model=config.get_periodization_model(),
        strict_fingerprint=strict or config.get_strict_fingerprint(),
    )

    try:
        result = assembler.assemble(request)
    except (CatalogEmptyError, StaleDiffError) as e:
        echo_error(str(e))
        ctx.exit(1)

    program = result.program
    if one_rep_max_path:
        records = read_json_file(ctx, one_rep_max_path, "one-rep-max")
        try:
            one_rep_maxes = one_rep_max_map(records)
        except ValueError as e:
            echo_error(f"Invalid one-rep-max file {one_rep_max_path}: {e}")
            ctx.exit(1)
        program.weeks = apply_one_rep_max_weights(
            program.weeks, one_rep_maxes, config.get_weight_increment()
        )

    for skipped in result.report.skipped:
        echo_warning(
            f"Week {skipped.week_number}: skipped change for day {skipped.day_number}, "
            f"exercise {skipped.exercise_index} ({skipped.reason})"
        )
    for error in result.report.consistency.errors:
        echo_warning(f"Structural drift: {error}")
    echo_info(result.assembly_notes)

    content = json.dumps(program.to_dict(), indent=2)

    if save:
        db_path = get_db_path(config.get_data_dir())
        await init_db(db_path)
        await ProgramRepository(db_path).save(program)
        echo_success(f"Program saved with ID {program.id}")

    if output:
        with open(output, "w") as f:
            f.write(content)
        echo_success(f"Exported to {output}")
    elif not save:
        click.echo(content)
