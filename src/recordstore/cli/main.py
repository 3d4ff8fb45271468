"""recordstore CLI - Main entry point."""

import logging
import sys
from typing import Annotated

import typer

import recordstore
from recordstore.cli.context import CLIContext, get_primary_key

# Create main Typer app
app = typer.Typer(
    name="recordstore",
    help="recordstore CLI - Load records once, look them up by key",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    key: Annotated[
        str | None,
        typer.Option(
            "--key",
            "-k",
            envvar="RECORDSTORE_PRIMARY_KEY",
            help="Primary key field (unique per record)",
        ),
    ] = None,
    ignore_case: Annotated[
        bool,
        typer.Option(
            "--ignore-case",
            "-i",
            help="Compare keys ignoring case in every index",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log store and index activity to stderr",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    ctx.obj = CLIContext(
        primary_key=get_primary_key(key),
        case_insensitive=ignore_case,
        json_output=json_output,
    )


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"recordstore v{recordstore.__version__}")


# Register commands
from recordstore.cli.commands import info, query

app.command(name="lookup")(query.lookup_command)
app.command(name="find")(query.find_command)
app.command(name="info")(info.info_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
