"""Custom exceptions for pgsink.

Database driver errors raised while probing or creating tables are not
wrapped: callers receive exactly what the database handle raised.
"""

from __future__ import annotations

from typing import Any


class PgSinkError(Exception):
    """Base exception for all pgsink errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConnectionError(PgSinkError):
    """Failed to connect to the database."""

    pass


class InvalidIdentifierError(PgSinkError):
    """A table, schema or column name cannot be safely quoted."""

    def __init__(self, identifier: str, reason: str) -> None:
        message = f"Invalid identifier {identifier!r}: {reason}"
        super().__init__(message, {"identifier": identifier, "reason": reason})
        self.identifier = identifier
        self.reason = reason


class InvalidColumnSetError(PgSinkError):
    """Column names, data types and roles do not line up."""

    pass


class TemplateError(PgSinkError):
    """A CREATE TABLE template is missing a required placeholder."""

    def __init__(self, template: str, missing: list[str]) -> None:
        message = (
            f"Template {template!r} is missing placeholder(s): {', '.join(missing)}. "
            "Templates must contain both {TABLE} and {COLUMNS}."
        )
        super().__init__(message, {"template": template, "missing": missing})
        self.template = template
        self.missing = missing
