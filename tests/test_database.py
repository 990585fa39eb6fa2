"""Tests for the Database wrapper: end-to-end on in-memory SQLite plus mocked drivers."""

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pymysql
import pytest
from pymysql.connections import Connection as MySQLConnection

from pydbal import (
    ArityMismatch,
    Database,
    DatabaseConnectionError,
    NoActiveStatement,
    ProductTypeEnum,
    TypeMismatch,
)


@pytest.fixture
def db() -> Iterator[Database]:
    database = Database.connect({"product_type": "sqlite", "database": ":memory:"})
    database.query(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, grp TEXT, points INTEGER)"
    )
    for name, grp, points in [
        ("alice", "user", 8000),
        ("bob", "user", 100),
        ("o'hara", "admin", 9000),
    ]:
        database.query("INSERT INTO ?t (name, grp, points) VALUES (?s, ?s, ?i)", "users", name, grp, points)
    yield database
    database.close()


class TestPrepare:
    def test_without_parameters_returns_sql(self, db: Database):
        assert db.prepare("SELECT ?s") == "SELECT ?s"

    def test_with_parameters(self, db: Database):
        out = db.prepare("SELECT * FROM users WHERE grp = ?s AND points > ?i", "user", 7000)
        assert out == "SELECT * FROM users WHERE grp = 'user' AND points > 7000"


class TestQuery:
    def test_results(self, db: Database):
        db.query("SELECT name FROM users WHERE grp = ?s AND points > ?i ORDER BY id", "user", 7000)
        assert db.results() == [{"name": "alice"}]

    def test_results_keyed_by_primary_key(self, db: Database):
        db.query("SELECT id, name FROM users ORDER BY id")
        rows = db.results("name")
        assert list(rows) == ["alice", "bob", "o'hara"]
        assert rows["bob"] == {"id": 2, "name": "bob"}

    def test_in_array(self, db: Database):
        db.query("SELECT name FROM users WHERE name IN(?a) ORDER BY name", ["bob", "o'hara"])
        assert [r["name"] for r in db.results()] == ["bob", "o'hara"]

    def test_result_row_and_column(self, db: Database):
        db.query("SELECT name, points FROM users WHERE id = ?i", "3")
        assert db.result() == {"name": "o'hara", "points": 9000}
        db.query("SELECT name, points FROM users WHERE id = ?i", 1)
        assert db.result("points") == 8000

    def test_result_column_index(self, db: Database):
        db.query("SELECT name, points FROM users WHERE id = ?i", 1)
        assert db.result(0) == "alice"
        db.query("SELECT name, points FROM users WHERE id = ?i", 1)
        assert db.result(1) == 8000
        db.query("SELECT name, points FROM users WHERE id = ?i", 1)
        assert db.result(2) is None

    def test_result_missing_column_returns_none(self, db: Database):
        db.query("SELECT name FROM users WHERE id = 1")
        assert db.result("nope") is None

    def test_result_no_row_returns_none(self, db: Database):
        db.query("SELECT name FROM users WHERE id = ?i", 999)
        assert db.result() is None
        db.query("SELECT name FROM users WHERE id = ?i", 999)
        assert db.result("name") is None

    def test_query_replaces_current_statement(self, db: Database):
        first = db.query("SELECT 1 AS n")
        second = db.query("SELECT 2 AS n")
        assert first is not second
        assert db.results() == [{"n": 2}]

    def test_last_insert_id(self, db: Database):
        db.query("INSERT INTO users (name, grp, points) VALUES (?s, ?s, ?f)", "carol", "user", "1,5")
        assert db.last_insert_id() == 4
        db.query("SELECT points FROM users WHERE id = ?i", db.last_insert_id())
        assert db.result("points") == 1.5

    def test_raw_fragment(self, db: Database):
        cond = db.prepare("points > ?i", 5000)
        db.query("SELECT COUNT(*) AS c FROM users WHERE ?p", cond)
        assert db.result("c") == 2

    def test_arity_mismatch_executes_nothing(self):
        conn = MagicMock()
        database = Database(conn, product_type=ProductTypeEnum.SQLITE)
        with pytest.raises(ArityMismatch):
            database.query("SELECT ?s, ?s", "only one")
        conn.cursor.assert_not_called()

    def test_type_mismatch_executes_nothing(self):
        conn = MagicMock()
        database = Database(conn, product_type=ProductTypeEnum.SQLITE)
        with pytest.raises(TypeMismatch):
            database.query("UPDATE users SET ?A", ["a", "b"])
        conn.cursor.assert_not_called()

    def test_driver_error_propagates(self):
        conn = MagicMock()
        error = pymysql.err.ProgrammingError(1064, "syntax error")
        conn.cursor.return_value.execute.side_effect = error
        database = Database(conn, product_type=ProductTypeEnum.MYSQL)
        with pytest.raises(pymysql.err.ProgrammingError) as exc:
            database.query("SELEC 1")
        assert exc.value is error


class TestPersistence:
    def test_insert_survives_reopen(self, tmp_path):
        datasource = {"product_type": "sqlite", "database": str(tmp_path / "app.sqlite")}
        with Database.connect(datasource) as database:
            database.query("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
            database.query("INSERT INTO users (name) VALUES (?s)", "alice")

        with Database.connect(datasource) as database:
            database.query("SELECT COUNT(*) AS c FROM users")
            assert database.result("c") == 1


class TestStatementState:
    def test_results_before_query(self):
        database = Database(MagicMock(), product_type=ProductTypeEnum.SQLITE)
        with pytest.raises(NoActiveStatement):
            database.results()
        with pytest.raises(NoActiveStatement):
            database.result()


class TestQuoteSelection:
    def test_explicit_quote_wins(self):
        conn = MagicMock()
        database = Database(conn, quote=lambda v: "Q", product_type=ProductTypeEnum.MYSQL)
        assert database.prepare("?s", "x") == "Q"
        conn.escape.assert_not_called()

    def test_unknown_connection_rejected(self):
        conn = MagicMock(spec=["cursor", "close", "escape"])
        with pytest.raises(ValueError, match="pass product_type or quote"):
            Database(conn)

    def test_mysql_detected_from_connection(self):
        conn = MagicMock(spec=MySQLConnection)
        conn.escape.return_value = "'esc'"
        database = Database(conn)
        assert database.prepare("WHERE name = ?s", "\\' OR 1=1 -- ") == "WHERE name = 'esc'"
        conn.escape.assert_called_once_with("\\' OR 1=1 -- ")

    def test_mysql_escape_used(self):
        conn = MagicMock()
        conn.escape.return_value = "'esc'"
        database = Database(conn, product_type=ProductTypeEnum.MYSQL)
        assert database.prepare("WHERE a = ?s", "x") == "WHERE a = 'esc'"
        conn.escape.assert_called_once_with("x")


class TestConnect:
    @patch("pydbal.core.connect.pymysql.connect")
    def test_connect_failure_raises(self, mock_connect: MagicMock):
        mock_connect.side_effect = pymysql.err.OperationalError(2003, "refused")
        with pytest.raises(DatabaseConnectionError):
            Database.connect(
                {"product_type": "mysql", "host": "h", "database": "d", "username": "u"}
            )

    def test_context_manager_closes(self):
        conn = MagicMock()
        with Database(conn, product_type=ProductTypeEnum.SQLITE) as database:
            database.query("SELECT 1")
        conn.close.assert_called_once()
