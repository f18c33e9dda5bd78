"""Table provisioning for pgsink.

- TableManager: existence cache plus CREATE TABLE execution
- sql: identifier quoting and template rendering
"""

from pgsink.tables.manager import TableManager

__all__ = ["TableManager"]
