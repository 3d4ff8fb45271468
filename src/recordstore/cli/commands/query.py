"""Lookup commands: by primary key and by secondary index."""

from typing import Annotated

import typer

from recordstore.cli.context import CLIContext
from recordstore.cli.output import OutputFormatter
from recordstore.exceptions import RecordNotFoundError

SourceArgument = Annotated[
    str, typer.Argument(help="JSON/JSONL file, or a database URL used with --query")
]
QueryOption = Annotated[
    str | None,
    typer.Option("--query", "-q", help="SQL query selecting the records (database sources)"),
]
AnyCaseOption = Annotated[
    bool,
    typer.Option("--any-case", help="Match keys ignoring case, even on a case-sensitive index"),
]


def lookup_command(
    ctx: typer.Context,
    source: SourceArgument,
    keys: Annotated[list[str], typer.Argument(help="Primary key value(s) to look up")],
    query: QueryOption = None,
    any_case: AnyCaseOption = False,
) -> None:
    """Look up records by primary key.

    Examples:

        recordstore lookup people.json 42
        recordstore --key email lookup people.jsonl alice@example.com --any-case
        recordstore lookup sqlite:///hr.db 7 -q "SELECT * FROM staff"
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        store = cli_ctx.load(source, query=query)
        search = store.case_insensitive_lookup if any_case else store.lookup

        matches = [record for key in keys for record in search(key)]
        if not matches:
            raise RecordNotFoundError(", ".join(keys))
        formatter.print_records(f"{store.primary_key} lookup", matches)

    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)


def find_command(
    ctx: typer.Context,
    source: SourceArgument,
    field_name: Annotated[str, typer.Argument(help="Field to index")],
    value: Annotated[str, typer.Argument(help="Field value to match")],
    query: QueryOption = None,
    any_case: AnyCaseOption = False,
) -> None:
    """Find records by a non-key field through a secondary index.

    Examples:

        recordstore find people.json department Sales
        recordstore find people.json name smith --any-case
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        store = cli_ctx.load(source, query=query, indices=[field_name])
        index = store.get_index(field_name)
        matches = index.case_insensitive_lookup(value) if any_case else index.lookup(value)
        formatter.print_records(f"{index.field_name} = {value}", matches)

    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
