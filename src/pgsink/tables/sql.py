"""SQL text generation for table provisioning.

Table and column names come from metrics discovered at runtime, so every
identifier is quoted here. Templates are trusted configuration and are
substituted textually.
"""

from __future__ import annotations

import re

from pgsink.core.types import ColumnSet
from pgsink.exceptions import InvalidIdentifierError, TemplateError

TABLE_PLACEHOLDER = "{TABLE}"
COLUMNS_PLACEHOLDER = "{COLUMNS}"
_PLACEHOLDERS = re.compile(re.escape(TABLE_PLACEHOLDER) + "|" + re.escape(COLUMNS_PLACEHOLDER))

# PostgreSQL truncates longer identifiers (NAMEDATALEN - 1)
MAX_IDENTIFIER_BYTES = 63

# An empty schema resolves to the session's current schema
TABLE_EXISTS_STATEMENT = (
    "SELECT tablename FROM pg_tables "
    "WHERE tablename = $1 AND schemaname = COALESCE(NULLIF($2, ''), current_schema())"
)


def quote_identifier(name: str) -> str:
    """Quote an identifier, doubling any embedded double quotes.

    Args:
        name: Raw identifier

    Returns:
        The identifier wrapped in double quotes

    Raises:
        InvalidIdentifierError: If the name is empty, contains NUL or is too long
    """
    if not name:
        raise InvalidIdentifierError(name, "identifier is empty")
    if "\x00" in name:
        raise InvalidIdentifierError(name, "identifier contains a NUL character")
    if len(name.encode("utf-8")) > MAX_IDENTIFIER_BYTES:
        raise InvalidIdentifierError(
            name, f"identifier is longer than {MAX_IDENTIFIER_BYTES} bytes"
        )
    return '"' + name.replace('"', '""') + '"'


def full_table_name(schema: str, table_name: str) -> str:
    """Quoted table name, qualified by the schema when one is set."""
    if schema:
        return f"{quote_identifier(schema)}.{quote_identifier(table_name)}"
    return quote_identifier(table_name)


def build_columns_clause(columns: ColumnSet) -> str:
    """Render ``"name" type`` pairs in column order, comma separated."""
    return ",".join(
        f"{quote_identifier(name)} {data_type}"
        for name, data_type in zip(columns.names, columns.data_types, strict=True)
    )


def render_create_statement(
    template: str, schema: str, table_name: str, columns: ColumnSet
) -> str:
    """Fill a CREATE TABLE template for one table.

    Args:
        template: Template containing {TABLE} and {COLUMNS}
        schema: Schema qualifying the table, empty for none
        table_name: Table to create
        columns: Column metadata, rendered in order

    Returns:
        The statement to execute
    """
    clauses = {
        TABLE_PLACEHOLDER: full_table_name(schema, table_name),
        COLUMNS_PLACEHOLDER: build_columns_clause(columns),
    }
    # Single pass, so quoted names containing a placeholder are left alone
    return _PLACEHOLDERS.sub(lambda m: clauses[m.group(0)], template)


def missing_placeholders(template: str) -> list[str]:
    """List the placeholders a template does not contain."""
    return [p for p in (TABLE_PLACEHOLDER, COLUMNS_PLACEHOLDER) if p not in template]


def check_template(template: str) -> str:
    """Return the template unchanged, or raise TemplateError if a placeholder is missing."""
    missing = missing_placeholders(template)
    if missing:
        raise TemplateError(template, missing)
    return template
