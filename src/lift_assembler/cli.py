"""CLI entry point for lift-assembler."""

import click

from . import __version__
from .commands import assemble, init, match, programs, serve, validate
from .config import Config, configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="lift-assembler")
@click.option(
    "--config",
    "config_path",
    type=click.Path(),
    help="Path to lift_assembler.yaml (default: $LIFT_ASSEMBLER_CONFIG or ./lift_assembler.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable info logging")
@click.pass_context
def main(ctx, config_path: str | None, verbose: bool):
    """lift-assembler: Deterministic training program assembly.

    Turns a generated Week 1 template plus sparse per-week progression diffs
    into a complete, structurally consistent multi-week program, correcting
    exercise references against a catalog along the way.

    Example usage:

        # Initialize the program store
        lift-assembler init

        # Check how an exercise name resolves
        lift-assembler match "Barbell Bench Pres"

        # Assemble and store a 4-week program
        lift-assembler assemble -t week1.json -d diffs.json -w 4 --save

        # View and export programs
        lift-assembler programs list
    """
    config = Config(config_path)
    ctx.obj = config
    configure_logging("INFO" if verbose else config.get_log_level())


# Register commands
main.add_command(init)
main.add_command(match)
main.add_command(assemble)
main.add_command(validate)
main.add_command(programs)
main.add_command(serve)


def run():
    """Run the CLI (handles async event loop)."""
    main()


if __name__ == "__main__":
    run()
