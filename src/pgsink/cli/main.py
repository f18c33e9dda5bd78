"""pgsink CLI - Main entry point."""

import logging
import sys
from typing import Annotated

import typer

import pgsink
from pgsink.cli.context import CLIContext
from pgsink.config import TableConfig, get_database_url

# Create main Typer app
app = typer.Typer(
    name="pgsink",
    help="pgsink CLI - provision PostgreSQL tables for metric writers",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    database: Annotated[
        str | None,
        typer.Option(
            "--database",
            "-d",
            envvar="PGSINK_URL",
            help="PostgreSQL database URL",
        ),
    ] = None,
    schema: Annotated[
        str,
        typer.Option(
            "--schema",
            "-s",
            help="Schema that holds metric tables (empty for unqualified names)",
        ),
    ] = "public",
    echo: Annotated[
        bool,
        typer.Option(
            "--echo",
            "-e",
            help="Echo SQL statements to console",
        ),
    ] = False,
    tags_as_foreign_keys: Annotated[
        bool,
        typer.Option(
            "--tags-as-foreign-keys",
            help="Store tag sets in a separate tag table referenced by tag_id",
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
            help="Log table provisioning to stderr",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = TableConfig(
        address=get_database_url(database),
        schema_name=schema,
        tags_as_foreign_keys=tags_as_foreign_keys,
    )

    # Store in Typer context for command access
    ctx.obj = CLIContext(config=config, echo=echo, json_output=json_output)


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"pgsink v{pgsink.__version__}")


# Register command groups
from pgsink.cli.commands import tables

app.add_typer(tables.app, name="tables")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
