"""Shared test fixtures for pgsink."""

import os
from collections.abc import Generator
from typing import Any

import pytest

from pgsink.core.connection import DatabaseConnection
from pgsink.core.types import CommandResult


def _psycopg_available() -> bool:
    """Check if psycopg is installed."""
    try:
        import psycopg  # noqa: F401

        return True
    except ImportError:
        return False


def _postgresql_connectable(url: str) -> bool:
    """Check if we can connect to PostgreSQL."""
    if not _psycopg_available():
        return False
    try:
        conn = DatabaseConnection(url)
        result = conn.test_connection()
        conn.close()
        return result
    except Exception:
        return False


class FakeDatabase:
    """Database handle that records statements instead of running them.

    Every call returns ``result`` or raises ``error``.
    """

    def __init__(self, result: CommandResult | None = None, error: Exception | None = None):
        self.result = result or CommandResult()
        self.error = error
        self.statements: list[str] = []
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def exec(self, statement: str, *args: Any) -> CommandResult:
        self.statements.append(statement)
        self.calls.append((statement, args))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def make_db() -> type[FakeDatabase]:
    """Factory for fake databases with a chosen result or error."""
    return FakeDatabase


@pytest.fixture
def fake_db() -> FakeDatabase:
    """A fake database whose statements all succeed."""
    return FakeDatabase()


@pytest.fixture
def postgresql_url() -> str:
    """Get PostgreSQL URL from environment or use default."""
    url = os.environ.get("TEST_DATABASE_URL")
    if not url:
        # Default to local PostgreSQL
        url = "postgresql://localhost/pgsink_test"

    if not _psycopg_available():
        pytest.skip("psycopg not installed")

    # Skip if can't connect (no PostgreSQL server)
    if not _postgresql_connectable(url):
        pytest.skip(f"Cannot connect to PostgreSQL at {url}")

    return url


@pytest.fixture
def pg_conn(postgresql_url: str) -> Generator[DatabaseConnection, None, None]:
    """A live connection with a scratch schema dropped afterwards."""
    conn = DatabaseConnection(postgresql_url)
    conn.exec('CREATE SCHEMA IF NOT EXISTS "pgsink_test"')
    yield conn
    conn.exec('DROP SCHEMA IF EXISTS "pgsink_test" CASCADE')
    conn.close()
