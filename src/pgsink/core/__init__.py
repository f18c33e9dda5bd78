"""Core components for pgsink."""

from pgsink.core.connection import DatabaseConnection, DatabaseHandle
from pgsink.core.types import ColumnRole, ColumnSet, CommandResult

__all__ = [
    "DatabaseConnection",
    "DatabaseHandle",
    "ColumnRole",
    "ColumnSet",
    "CommandResult",
]
