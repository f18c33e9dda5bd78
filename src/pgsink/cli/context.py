"""CLI context management for database connections and shared state."""

from dataclasses import dataclass, field

from pgsink.config import TableConfig
from pgsink.core.connection import DatabaseConnection
from pgsink.tables.manager import TableManager


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Manages database connection lifecycle and output preferences.
    """

    config: TableConfig
    echo: bool
    json_output: bool
    _db: DatabaseConnection | None = field(default=None, init=False, repr=False)

    def get_db(self) -> DatabaseConnection:
        """Get or create database connection (lazy initialization).

        Returns:
            DatabaseConnection instance
        """
        if self._db is None:
            self._db = DatabaseConnection(self.config.address, echo=self.echo)
        return self._db

    def get_manager(self) -> TableManager:
        """Build a table manager bound to the configured database."""
        return self.config.build_manager(self.get_db())

    def close(self) -> None:
        """Close database connection if open."""
        if self._db is not None:
            self._db.close()
            self._db = None
