"""
Database: thin execution wrapper around one DB-API connection.

query() compiles the placeholder template (when parameters are given),
executes it and keeps the cursor as the current statement; results() and
result() read from that statement. One connection and one current statement
per instance: not thread-safe, use separate instances per thread.

Driver errors from execute/fetch propagate unchanged.
"""

import logging
from collections.abc import Callable
from typing import Any, Protocol

from pydbal.core.connect import (
    connect,
    cursor_to_dicts,
    detect_product_type,
    execute,
    fetch_one_dict,
    last_insert_id,
    make_quote,
)
from pydbal.engines.sql import compile_template
from pydbal.exceptions import NoActiveStatement
from pydbal.models import DataSource, ProductTypeEnum

_log = logging.getLogger(__name__)


class DBInterface(Protocol):
    def query(self, sql: str, *parameters: Any) -> Any: ...

    def prepare(self, sql: str, *parameters: Any) -> str: ...

    def results(self, primary_key: str | None = None) -> list[dict[str, Any]] | dict[Any, dict[str, Any]]: ...

    def result(self, column: str | int | None = None) -> Any: ...

    def last_insert_id(self) -> Any: ...


class Database:
    """
    Placeholder-template queries over one connection.

    - connection: an open DB-API connection.
    - quote: literal escaper; defaults to the driver escaper for product_type.
    - product_type: selects the escaper and how last_insert_id() is read;
      detected from the connection class when omitted. ValueError when it
      cannot be detected and no quote is given.
    """

    def __init__(
        self,
        connection: Any,
        quote: Callable[[Any], str] | None = None,
        *,
        product_type: ProductTypeEnum | None = None,
    ) -> None:
        self._conn = connection
        self._product_type = product_type or detect_product_type(connection)
        self._quote = quote or make_quote(connection, self._product_type)
        self._cursor: Any = None

    @classmethod
    def connect(cls, datasource: DataSource | dict[str, Any]) -> "Database":
        """Open a connection for *datasource*; raises DatabaseConnectionError on failure."""
        conn = connect(datasource)
        pt = datasource["product_type"] if isinstance(datasource, dict) else datasource.product_type
        return cls(conn, product_type=ProductTypeEnum(pt))

    @property
    def connection(self) -> Any:
        return self._conn

    def prepare(self, sql: str, *parameters: Any) -> str:
        """Return *sql* with placeholders replaced; unchanged when no parameters."""
        if not parameters:
            return sql
        return compile_template(sql, parameters, self._quote)

    def query(self, sql: str, *parameters: Any) -> Any:
        """Execute *sql* (compiled with *parameters*) and return the cursor."""
        final_sql = self.prepare(sql, *parameters)
        _log.debug("Executing SQL: %s", final_sql)
        self._cursor = execute(self._conn, final_sql)
        return self._cursor

    def _current(self) -> Any:
        if self._cursor is None:
            raise NoActiveStatement("No statement has been executed; call query() first")
        return self._cursor

    def results(
        self, primary_key: str | None = None
    ) -> list[dict[str, Any]] | dict[Any, dict[str, Any]]:
        """
        All remaining rows of the current statement as dicts.

        With *primary_key*, a dict keyed by that column's value instead
        (a later row with the same key replaces an earlier one).
        """
        rows = cursor_to_dicts(self._current())
        if primary_key:
            return {row[primary_key]: row for row in rows}
        return rows

    def result(self, column: str | int | None = None) -> Any:
        """
        Next row of the current statement as a dict, or only *column* of it.

        *column* is a column name or a 0-based column index. Returns None when
        there is no row or the column is absent.
        """
        row = fetch_one_dict(self._current())
        if column is None:
            return row
        if row is None:
            return None
        if isinstance(column, int):
            values = list(row.values())
            return values[column] if 0 <= column < len(values) else None
        return row.get(column)

    def last_insert_id(self) -> Any:
        return last_insert_id(self._conn, self._cursor, self._product_type)

    def close(self) -> None:
        self._cursor = None
        self._conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
