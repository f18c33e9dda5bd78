"""Configuration for the PostgreSQL metrics output."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

from pgsink.tables.manager import TableManager
from pgsink.tables.sql import missing_placeholders

if TYPE_CHECKING:
    from pgsink.core.connection import DatabaseHandle

DEFAULT_DATABASE_URL = "postgresql://localhost/postgres"
DEFAULT_TABLE_TEMPLATE = "CREATE TABLE IF NOT EXISTS {TABLE}({COLUMNS})"
DEFAULT_TAG_TABLE_TEMPLATE = "CREATE TABLE IF NOT EXISTS {TABLE}({COLUMNS}, PRIMARY KEY (tag_id))"


def get_database_url(url: str | None) -> str:
    """Resolve database URL from CLI arg, environment variable, or default.

    Priority:
    1. Explicit URL argument
    2. PGSINK_URL environment variable
    3. Default: postgresql://localhost/postgres
    """
    if url:
        return url
    if env_url := os.getenv("PGSINK_URL"):
        return env_url
    return DEFAULT_DATABASE_URL


class TableConfig(BaseModel):
    """Settings that shape how metric tables are provisioned."""

    address: str = Field(default=DEFAULT_DATABASE_URL, description="Database connection URL")
    schema_name: str = Field(default="public", description="Schema that holds metric tables")
    table_template: str = Field(
        default=DEFAULT_TABLE_TEMPLATE, description="CREATE statement for metric tables"
    )
    tag_table_template: str = Field(
        default=DEFAULT_TAG_TABLE_TEMPLATE, description="CREATE statement for tag tables"
    )
    tags_as_foreign_keys: bool = Field(
        default=False, description="Store tag sets in a separate table referenced by tag_id"
    )
    tag_table_suffix: str = Field(default="_tag", description="Suffix appended to tag table names")

    @field_validator("table_template", "tag_table_template")
    @classmethod
    def _require_placeholders(cls, value: str) -> str:
        missing = missing_placeholders(value)
        if missing:
            raise ValueError(f"template is missing placeholder(s): {', '.join(missing)}")
        return value

    def tag_table_name(self, measurement: str) -> str | None:
        """Name of the tag table belonging to a measurement.

        Returns None when tags are stored inline in the metric table.
        """
        if not self.tags_as_foreign_keys:
            return None
        return measurement + self.tag_table_suffix

    def build_manager(self, db: DatabaseHandle) -> TableManager:
        """Create the table manager for this destination."""
        return TableManager(db, self.schema_name, self.table_template, self.tag_table_template)
