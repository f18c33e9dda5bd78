"""Table provisioning commands."""

from typing import Annotated

import typer

from pgsink.cli.context import CLIContext
from pgsink.cli.output import OutputFormatter
from pgsink.cli.parsing import parse_column_set
from pgsink.tables.sql import check_template, render_create_statement

# Create tables subcommand group
app = typer.Typer(help="Check, render and create metric tables")

ColumnsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--column",
        "-c",
        help="Column spec: name:type[:role]. Repeat in table order.",
    ),
]
TagTableOption = Annotated[
    bool,
    typer.Option("--tag-table", help="Use the tag table template"),
]


@app.command("render")
def tables_render(
    ctx: typer.Context,
    table_name: Annotated[str, typer.Argument(help="Table name")],
    columns: ColumnsOption = None,
    tag_table: TagTableOption = False,
    template: Annotated[
        str | None,
        typer.Option("--template", "-t", help="Override the CREATE TABLE template"),
    ] = None,
) -> None:
    """Print the CREATE TABLE statement without touching the database.

    Examples:

        pgsink tables render cpu -c time:timestamptz:time -c host:text:tag -c usage:float8
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        column_set = parse_column_set(columns or [], is_tag_table=tag_table)
        if template is None:
            config = cli_ctx.config
            template = config.tag_table_template if tag_table else config.table_template
        statement = render_create_statement(
            check_template(template), cli_ctx.config.schema_name, table_name, column_set
        )
        formatter.print_statement(statement)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)


@app.command("names")
def tables_names(
    ctx: typer.Context,
    measurement: Annotated[str, typer.Argument(help="Measurement name")],
) -> None:
    """Show the tables a measurement is written to.

    The tag table is only listed with --tags-as-foreign-keys.

    Examples:

        pgsink --tags-as-foreign-keys tables names cpu
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    tag_table = cli_ctx.config.tag_table_name(measurement)
    if cli_ctx.json_output:
        formatter.print_data({"table": measurement, "tag_table": tag_table})
    else:
        typer.echo(f"Metric table: {measurement}")
        typer.echo(f"Tag table: {tag_table or '(tags stored inline)'}")


@app.command("exists")
def tables_exists(
    ctx: typer.Context,
    table_name: Annotated[str, typer.Argument(help="Table name")],
) -> None:
    """Check whether a table exists in the configured schema.

    Exits with code 1 when the table is missing or the check failed.

    Examples:

        pgsink tables exists cpu
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        manager = cli_ctx.get_manager()
        found = manager.exists(table_name)
        if cli_ctx.json_output:
            formatter.print_success(
                "Table check complete",
                {"table": table_name, "schema": manager.schema, "exists": found},
            )
        elif found:
            typer.echo(f"Table {table_name} exists")
        else:
            typer.echo(f"Table {table_name} does not exist")
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()

    if not found:
        raise typer.Exit(code=1)


@app.command("create")
def tables_create(
    ctx: typer.Context,
    table_name: Annotated[str, typer.Argument(help="Table name")],
    columns: ColumnsOption = None,
    tag_table: TagTableOption = False,
) -> None:
    """Create a table unless it already exists.

    Examples:

        pgsink tables create cpu -c time:timestamptz:time -c host:text:tag -c usage:float8

        pgsink tables create cpu_tag --tag-table -c tag_id:serial:tag_id -c host:text:tag
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        column_set = parse_column_set(columns or [], is_tag_table=tag_table)
        manager = cli_ctx.get_manager()
        if manager.exists(table_name):
            formatter.print_success(
                f"Table {table_name} already exists", {"table": table_name, "created": False}
            )
            return

        manager.create_table(table_name, column_set)
        if not cli_ctx.json_output:
            formatter.print_columns(table_name, column_set)
        formatter.print_success(
            f"Table {table_name} created", {"table": table_name, "created": True}
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
