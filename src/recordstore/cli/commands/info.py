"""Store inspection command."""

from typing import Annotated

import typer

from recordstore.cli.commands.query import QueryOption, SourceArgument
from recordstore.cli.context import CLIContext
from recordstore.cli.output import OutputFormatter


def info_command(
    ctx: typer.Context,
    source: SourceArgument,
    indices: Annotated[
        list[str] | None,
        typer.Option("--index", "-x", help="Field to build a secondary index on (repeatable)"),
    ] = None,
    query: QueryOption = None,
) -> None:
    """Load a source and show record and index statistics.

    Loading fails on a missing or duplicate primary key, so this also checks
    that the key field really is unique.

    Examples:

        recordstore info people.json
        recordstore --key email info people.jsonl -x department -x city
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        store = cli_ctx.load(source, query=query, indices=indices)
        formatter.print_store_info(store.describe())

    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
