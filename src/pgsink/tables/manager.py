"""Table provisioning with a reconciled existence cache.

Writers call ``exists`` before writing a batch and ``create_table`` when the
table is missing. Known tables are answered from memory; unknown ones are
probed in the PostgreSQL catalog.

Per table name the cache moves from unknown to True or False after a probe,
and from unknown or False to True after a successful CREATE. Nothing ever
moves back: tables are assumed never to be dropped while a manager lives.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from pgsink.tables.sql import TABLE_EXISTS_STATEMENT, render_create_statement

if TYPE_CHECKING:
    from pgsink.core.connection import DatabaseHandle
    from pgsink.core.types import ColumnSet

logger = logging.getLogger(__name__)


class TableManager:
    """Ensures metric and tag tables exist before rows are written.

    One manager is created per output destination. The database handle is
    shared with the writer and is never closed here.
    """

    def __init__(
        self,
        db: DatabaseHandle,
        schema: str,
        table_template: str,
        tag_table_template: str,
    ) -> None:
        """Initialize table manager.

        Args:
            db: Handle used to run the probe and CREATE statements
            schema: Schema qualifying created tables, empty for unqualified
            table_template: CREATE template for metric tables
            tag_table_template: CREATE template for tag tables
        """
        self._db = db
        self._schema = schema
        self._table_template = table_template
        self._tag_table_template = tag_table_template
        self._tables: dict[str, bool] = {}
        self._lock = threading.Lock()

    @property
    def db(self) -> DatabaseHandle:
        return self._db

    @property
    def schema(self) -> str:
        return self._schema

    @property
    def table_template(self) -> str:
        return self._table_template

    @property
    def tag_table_template(self) -> str:
        return self._tag_table_template

    def cached(self, table_name: str) -> bool | None:
        """Return the cached existence flag, or None if the table was never checked."""
        with self._lock:
            return self._tables.get(table_name)

    def exists(self, table_name: str) -> bool:
        """Check whether a table exists, consulting the cache first.

        A failed probe answers False without caching anything, so the next
        call probes again.

        Args:
            table_name: Unqualified table name

        Returns:
            True if the table is known to exist
        """
        with self._lock:
            if table_name in self._tables:
                return self._tables[table_name]

        try:
            result = self._db.exec(TABLE_EXISTS_STATEMENT, table_name, self._schema)
        except Exception as e:
            logger.error(
                f"Error checking for existence of metric table: {table_name}\n"
                f"SQL: {TABLE_EXISTS_STATEMENT}\n{e}"
            )
            return False

        found = result.rows_affected == 1
        with self._lock:
            # A concurrent create may already have confirmed the table
            if not self._tables.get(table_name):
                self._tables[table_name] = found
            return self._tables[table_name]

    def create_table(self, table_name: str, columns: ColumnSet) -> None:
        """Create a table from the matching template.

        Args:
            table_name: Unqualified table name
            columns: Column metadata; its order is the table's column order

        Raises:
            InvalidIdentifierError: If a table, schema or column name cannot be quoted
            Exception: Whatever the database handle raised, unchanged
        """
        if columns.is_tag_table and not columns.has_tag_id:
            logger.warning(f"Tag table {table_name} has no tag_id column")
        template = self._tag_table_template if columns.is_tag_table else self._table_template
        statement = render_create_statement(template, self._schema, table_name, columns)

        try:
            self._db.exec(statement)
        except Exception as e:
            logger.error(f"Could not create table {table_name}\nSQL: {statement}\n{e}")
            raise

        with self._lock:
            self._tables[table_name] = True
        logger.info(f"Created table {table_name}")
