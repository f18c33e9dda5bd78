"""Tests for database connection."""

import pytest
from sqlalchemy import text
from sqlalchemy.dialects import postgresql

from pgsink.core.connection import (
    DatabaseConnection,
    _bind_positional,
    _normalize_postgresql_url,
)
from pgsink.core.types import ColumnSet, CommandResult
from pgsink.exceptions import ConnectionError
from pgsink.tables.sql import render_create_statement


class TestUrlHandling:
    """Tests for URL normalization and parameter binding."""

    def test_postgresql_uses_psycopg3(self):
        assert (
            _normalize_postgresql_url("postgresql://user@localhost/db")
            == "postgresql+psycopg://user@localhost/db"
        )

    def test_explicit_driver_kept(self):
        url = "postgresql+psycopg2://user@localhost/db"
        assert _normalize_postgresql_url(url) == url

    def test_positional_parameters_become_named(self):
        sql, params = _bind_positional("SELECT $1, $2, $1", ("a", "b"))
        assert sql == "SELECT :p1, :p2, :p1"
        assert params == {"p1": "a", "p2": "b"}

    def test_statement_without_args_untouched(self):
        sql, params = _bind_positional("SELECT '$1'", ())
        assert sql == "SELECT '$1'"
        assert params == {}

    def test_colon_in_quoted_name_is_not_a_bind(self):
        """Quoted names containing a colon reach the server verbatim."""
        columns = ColumnSet.from_columns(
            [("time", "timestamptz", "time"), (":load", "float8", "field")]
        )
        statement = render_create_statement(
            "CREATE TABLE IF NOT EXISTS {TABLE}({COLUMNS})", "", "cpu", columns
        )

        sql, params = _bind_positional(statement, ())
        compiled = text(sql).compile(dialect=postgresql.dialect())

        assert compiled.construct_params(params) == {}
        assert str(compiled) == statement

    def test_casts_and_json_literals_pass_through(self):
        statement = "CREATE TABLE t (\"meta\" jsonb DEFAULT '{\"x\":1}'::jsonb, \"n\" int)"

        sql, params = _bind_positional(statement, ())
        compiled = text(sql).compile(dialect=postgresql.dialect())

        assert compiled.construct_params(params) == {}
        assert str(compiled) == statement

    def test_colons_escaped_alongside_positional_binds(self):
        sql, params = _bind_positional("SELECT $1::text, 'a:b'", ("x",))
        compiled = text(sql).compile(dialect=postgresql.dialect())

        assert compiled.construct_params(params) == {"p1": "x"}
        assert str(compiled) == "SELECT %(p1)s::text, 'a:b'"


class TestDatabaseConnection:
    """Tests for DatabaseConnection class."""

    def test_engine_created_lazily(self):
        """Engine is not created until accessed."""
        conn = DatabaseConnection("postgresql://localhost/pgsink_test")
        assert conn._engine is None

    def test_unsupported_dialect(self):
        """Only PostgreSQL is supported."""
        conn = DatabaseConnection("sqlite:///:memory:")
        with pytest.raises(ConnectionError) as exc_info:
            _ = conn.engine
        assert "Unsupported database dialect" in str(exc_info.value)
        assert conn._engine is None

    def test_invalid_url(self):
        """Invalid URL raises ConnectionError."""
        conn = DatabaseConnection("invalid://not-a-real-db")
        with pytest.raises(ConnectionError):
            conn.test_connection()

    def test_unreachable_server_is_not_alive(self):
        conn = DatabaseConnection("invalid://not-a-real-db")
        assert conn.is_alive() is False

    def test_close_without_engine(self):
        conn = DatabaseConnection("postgresql://localhost/pgsink_test")
        conn.close()
        assert conn._engine is None


@pytest.mark.integration
class TestPostgreSQLConnection:
    """Tests against a live PostgreSQL server."""

    def test_exec_counts_selected_rows(self, postgresql_url: str):
        with DatabaseConnection(postgresql_url) as conn:
            result = conn.exec("SELECT * FROM generate_series(1, $1)", 3)
            assert result == CommandResult(3)

    def test_exec_counts_affected_rows(self, pg_conn: DatabaseConnection):
        pg_conn.exec('CREATE TABLE "pgsink_test"."numbers" (n int)')
        pg_conn.do_copy("numbers", ["n"], [[1], [2], [3]], schema="pgsink_test")

        result = pg_conn.exec('UPDATE "pgsink_test"."numbers" SET n = n + 1 WHERE n > $1', 1)
        assert result.rows_affected == 2

    def test_do_copy_and_query(self, pg_conn: DatabaseConnection):
        pg_conn.exec('CREATE TABLE "pgsink_test"."cpu" ("host" text, "usage" float8)')

        written = pg_conn.do_copy(
            "cpu", ["host", "usage"], [("a", 1.5), ("b", 2.5)], schema="pgsink_test"
        )
        rows = pg_conn.query('SELECT host, usage FROM "pgsink_test"."cpu" ORDER BY host')

        assert written == 2
        assert [tuple(row) for row in rows] == [("a", 1.5), ("b", 2.5)]

    def test_do_copy_empty_batch(self, pg_conn: DatabaseConnection):
        assert pg_conn.do_copy("missing", ["x"], []) == 0

    def test_is_alive(self, pg_conn: DatabaseConnection):
        assert pg_conn.is_alive() is True
