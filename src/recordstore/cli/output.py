"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from recordstore.core.fields import field_names, read_field
from recordstore.core.types import StoreInfo
from recordstore.exceptions import RecordStoreError

console = Console()


def _columns(records: list[Any]) -> list[str]:
    """Union of field names across records, in first-seen order."""
    columns: list[str] = []
    for record in records:
        for name in field_names(record):
            if name not in columns:
                columns.append(name)
    return columns


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_table(
        self,
        title: str,
        data: list[dict[str, Any]],
        columns: list[str],
    ) -> None:
        """Print data as Rich table or JSON array.

        Args:
            title: Table title
            data: List of row dictionaries
            columns: Column names to display
        """
        if self.json_mode:
            print(json.dumps(data, default=str, indent=2))
        else:
            table = Table(title=title, show_header=True, header_style="bold magenta")
            for col in columns:
                table.add_column(col)
            for row in data:
                table.add_row(*[str(row.get(col, "")) for col in columns])
            console.print(table)

    def print_records(self, title: str, records: list[Any]) -> None:
        """Print matched records, one table row each.

        Args:
            title: Table title
            records: Records returned by a lookup
        """
        columns = _columns(records)
        rows = [
            {name: read_field(record, name) for name in field_names(record)} for record in records
        ]
        if not self.json_mode and not rows:
            console.print(f"{title}: no matching records", style="yellow")
            return
        self.print_table(title, rows, columns)

    def print_store_info(self, info: StoreInfo) -> None:
        """Print store summary with its index table.

        Args:
            info: Store summary to display
        """
        if self.json_mode:
            print(json.dumps(info.model_dump(), default=str, indent=2))
            return

        console.print(f"\n[bold]Primary key:[/bold] {info.primary_key}")
        console.print(f"Records: {info.record_count:,}")
        console.print(f"Case-insensitive keys: {'yes' if info.case_insensitive_keys else 'no'}")

        if info.indices:
            console.print(f"\n[bold]Indices ({len(info.indices)}):[/bold]")
            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("#")
            table.add_column("Field")
            table.add_column("Keys")
            table.add_column("Records")
            table.add_column("Ignore case")
            for index in info.indices:
                table.add_row(
                    str(index.position),
                    index.field_name,
                    f"{index.key_count:,}",
                    f"{index.record_count:,}",
                    "✓" if index.case_insensitive else "",
                )
            console.print(table)

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, RecordStoreError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            if isinstance(error, RecordStoreError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)
