"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from pgsink.core.types import ColumnSet
from pgsink.exceptions import PgSinkError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_columns(self, table_name: str, columns: ColumnSet) -> None:
        """Print the columns a table will be created with."""
        if self.json_mode:
            print(json.dumps({"table": table_name, **columns.model_dump()}, indent=2))
            return

        kind = "tag table" if columns.is_tag_table else "table"
        table = Table(title=f"{table_name} ({kind})", show_header=True, header_style="bold cyan")
        table.add_column("#")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Role")
        for i, (name, data_type, role) in enumerate(
            zip(columns.names, columns.data_types, columns.roles, strict=True)
        ):
            table.add_row(str(i), name, data_type, str(role))
        console.print(table)

    def print_statement(self, statement: str) -> None:
        """Print a SQL statement."""
        if self.json_mode:
            print(json.dumps({"statement": statement}, indent=2))
        else:
            console.print(Syntax(statement, "sql", word_wrap=True))

    def print_success(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Print success message.

        Args:
            message: Success message
            details: Optional details to display
        """
        if self.json_mode:
            output = {"success": True, "message": message}
            if details:
                output.update(details)
            print(json.dumps(output, default=str, indent=2))
        else:
            console.print(f"✓ {message}", style="green")
            if details:
                for key, value in details.items():
                    console.print(f"  {key}: {value}", style="dim")

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, PgSinkError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            if isinstance(error, PgSinkError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)

    def print_data(self, data: Any) -> None:
        """Print generic data (dict, list, etc.).

        Args:
            data: Data to print
        """
        if self.json_mode:
            print(json.dumps(data, default=str, indent=2))
        else:
            console.print(data)
