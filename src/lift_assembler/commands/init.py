"""Initialize project command."""

import click

from ..data import get_catalog_json_path
from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success, echo_warning, get_config


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Initialize the lift-assembler data directory and database.

    This creates the data directory and the SQLite program store.
    """
    config = get_config(ctx)
    for error in config.validate():
        echo_warning(f"Config: {error}")

    data_dir = config.get_data_dir()
    echo_info(f"Initializing lift-assembler in {data_dir}")

    db_path = get_db_path(data_dir)
    await init_db(db_path)
    echo_success("Program store initialized")

    catalog_path = config.get_catalog_path() or get_catalog_json_path(data_dir)
    if catalog_path.exists():
        echo_success(f"Exercise catalog found at {catalog_path}")
    else:
        echo_warning(
            f"No exercise catalog at {catalog_path}. Pass --catalog to match/assemble "
            "or set catalog.path in lift_assembler.yaml"
        )

    click.echo()
    click.echo("lift-assembler is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  lift-assembler match \"Barbell Bench Pres\" --catalog catalog.json")
    click.echo("  lift-assembler assemble -t week1.json -d diffs.json -w 4 --save")
