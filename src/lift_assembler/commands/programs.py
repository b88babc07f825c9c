"""Program management commands."""

import json

import click

from ..db import ProgramRepository, get_db_path
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    get_data_dir,
)


@click.group()
@click.pass_context
def programs(ctx):
    """Manage assembled programs.

    Commands for listing, viewing, exporting and deleting stored programs.
    """
    ensure_initialized(ctx)


def _repository(ctx: click.Context) -> ProgramRepository:
    return ProgramRepository(get_db_path(get_data_dir(ctx)))


@programs.command(name="list")
@click.option("--user", "user_id", help="Only list programs owned by this user")
@click.pass_context
@async_command
async def list_programs(ctx, user_id: str | None):
    """List all stored programs."""
    repo = _repository(ctx)

    all_programs = await repo.list_all(user_id)

    if not all_programs:
        echo_info("No programs found. Assemble one with 'lift-assembler assemble --save'")
        return

    headers = ["ID", "Name", "Days", "Weeks", "Created"]
    rows = []

    for prog in all_programs:
        created = prog.created_at.strftime("%Y-%m-%d") if prog.created_at else "N/A"
        rows.append([
            prog.id,
            prog.name[:30] + "..." if len(prog.name) > 30 else prog.name,
            str(prog.days_per_week),
            str(prog.total_weeks),
            created,
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_programs)} program(s)")


@programs.command()
@click.argument("program_id")
@click.option("--metadata", "-m", is_flag=True, help="Show computed program metadata")
@click.pass_context
@async_command
async def show(ctx, program_id: str, metadata: bool):
    """Show details of a specific program."""
    repo = _repository(ctx)

    program = await repo.get(program_id)
    if not program:
        echo_error(f"Program ID {program_id} not found")
        ctx.exit(1)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Program: {program.name} (ID: {program.id})")
    click.echo("=" * 60)
    click.echo()
    click.echo(f"Split: {program.split_type.value}")
    click.echo(f"Goal: {program.primary_goal.value}")
    click.echo(f"Created: {program.created_at}")
    click.echo()

    click.echo("Structure:")
    click.echo("-" * 40)
    click.echo(program.get_summary())

    if metadata:
        meta = program.metadata
        click.echo("Metadata:")
        click.echo("-" * 40)
        click.echo(f"  Total days: {meta.total_days}")
        click.echo(f"  Total exercises: {meta.total_exercises}")
        click.echo(f"  Estimated duration: {meta.estimated_total_duration} min")
        click.echo(f"  Exercise corrections: {meta.exercise_corrections}")
        click.echo(f"  Changes applied/skipped: {meta.diffs_applied}/{meta.changes_skipped}")
        if meta.muscle_group_coverage:
            click.echo("  Weekly sets per muscle:")
            for muscle, sets in sorted(meta.muscle_group_coverage.items()):
                click.echo(f"    - {muscle}: {sets}")
        for error in meta.consistency_errors:
            click.echo(f"  Drift: {error}")


@programs.command()
@click.argument("program_id")
@click.option("--output", "-o", type=click.Path(), help="Write to a file instead of stdout")
@click.pass_context
@async_command
async def export(ctx, program_id: str, output: str | None):
    """Export a program as JSON."""
    repo = _repository(ctx)

    data = await repo.get_raw(program_id)
    if data is None:
        echo_error(f"Program ID {program_id} not found")
        ctx.exit(1)

    content = json.dumps(data, indent=2)
    if output:
        with open(output, "w") as f:
            f.write(content)
        echo_success(f"Exported to {output}")
    else:
        click.echo(content)


@programs.command()
@click.argument("program_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, program_id: str, force: bool):
    """Delete a program."""
    repo = _repository(ctx)

    program = await repo.get(program_id)
    if not program:
        echo_error(f"Program ID {program_id} not found")
        ctx.exit(1)

    if not force:
        click.echo(f"Program: {program.name}")
        if not click.confirm("Are you sure you want to delete this program?"):
            echo_info("Cancelled")
            return

    await repo.delete(program_id)
    echo_success(f"Program {program_id} deleted")
