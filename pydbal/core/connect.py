"""
DB connection helpers.

Uses pymysql (MySQL), psycopg (PostgreSQL), trino (Trino) or sqlite3 (SQLite)
based on product_type. Besides opening connections this module provides the
per-driver literal escaper (``make_quote``) used by the template compiler.
"""

import logging
import sqlite3
from collections.abc import Callable
from typing import Any

import psycopg
import pymysql
from psycopg import sql as pg_sql
from pymysql.connections import Connection as MySQLConnection
from trino.auth import BasicAuthentication
from trino.dbapi import Connection as TrinoConnection
from trino.dbapi import connect as trino_connect
from trino.exceptions import TrinoExternalError, TrinoUserError

from pydbal.core.config import settings
from pydbal.core.dialects import get_dialect
from pydbal.engines.sql.filters import quote_literal
from pydbal.exceptions import DatabaseConnectionError
from pydbal.models import DataSource, ProductTypeEnum

_log = logging.getLogger(__name__)

_DRIVER_ERRORS: tuple[type[BaseException], ...] = (
    psycopg.Error,
    pymysql.Error,
    sqlite3.Error,
    TrinoUserError,
    TrinoExternalError,
    OSError,
)


def _get(datasource: Any, key: str) -> Any:
    """Get attribute or dict key from DataSource or dict."""
    if isinstance(datasource, dict):
        return datasource.get(key)
    return getattr(datasource, key, None)


def _resolve_product_type(
    datasource: Any, product_type: ProductTypeEnum | None
) -> ProductTypeEnum:
    pt = product_type or _get(datasource, "product_type")
    if pt is None:
        raise ValueError("product_type is required (from datasource or argument)")
    if isinstance(pt, str):
        return ProductTypeEnum(pt)
    return pt


def _open(pt: ProductTypeEnum, datasource: Any) -> Any:
    host = _get(datasource, "host")
    port = _get(datasource, "port") or get_dialect(pt).default_port
    database = _get(datasource, "database")
    username = _get(datasource, "username")
    password = _get(datasource, "password")
    password = password if password is not None else ""
    options = dict(_get(datasource, "options") or {})
    timeout = settings.EXTERNAL_DB_CONNECT_TIMEOUT

    if pt == ProductTypeEnum.SQLITE:
        if database is None:
            raise ValueError("datasource must provide database")
        return sqlite3.connect(
            database, timeout=timeout, **({"isolation_level": None} | options)
        )

    for name, val in [
        ("host", host),
        ("database", database),
        ("username", username),
    ]:
        if val is None:
            raise ValueError(f"datasource must provide {name}")

    if pt == ProductTypeEnum.MYSQL:
        # Default pymysql cursors buffer the whole result set client-side.
        # Autocommit: statements sent through query() persist on their own.
        return pymysql.connect(
            host=host,
            port=int(port),
            database=database,
            user=username,
            password=password,
            connect_timeout=timeout,
            autocommit=options.pop("autocommit", True),
            **options,
        )
    if pt == ProductTypeEnum.POSTGRES:
        return psycopg.connect(
            host=host,
            port=int(port),
            dbname=database,
            user=username,
            password=password,
            connect_timeout=timeout,
            autocommit=options.pop("autocommit", True),
            **options,
        )
    if pt == ProductTypeEnum.TRINO:
        use_ssl = _get(datasource, "use_ssl") in (True, "true", "1")
        if use_ssl and not (password and password.strip()):
            raise ValueError("Password is required for Trino when using SSL/HTTPS.")
        return trino_connect(
            host=host,
            port=int(port),
            user=username,
            auth=BasicAuthentication(username, password) if use_ssl else None,
            catalog=database,
            source="pydbal",
            http_scheme="https" if use_ssl else "http",
            request_timeout=timeout,
            **options,
        )
    raise ValueError(f"Unsupported product_type: {pt}")


def connect(
    datasource: DataSource | dict[str, Any],
    *,
    product_type: ProductTypeEnum | None = None,
) -> Any:
    """
    Open a connection to a DB from a DataSource or connection dict.

    - datasource: DataSource model or dict with host, port, database, username,
      password, options and product_type (or pass product_type=).
    - Missing settings raise ValueError; a driver failure raises
      DatabaseConnectionError with the driver error as its cause.
    """
    pt = _resolve_product_type(datasource, product_type)
    host = _get(datasource, "host")
    try:
        conn = _open(pt, datasource)
    except _DRIVER_ERRORS as e:
        _log.error("Connection to %s at %s failed: %s", pt.value, host, e, exc_info=True)
        raise DatabaseConnectionError(pt.value, host, str(e)) from e
    _log.debug("Connected to %s at %s", get_dialect(pt).scheme, host or _get(datasource, "database"))
    return conn


def execute(conn: Any, sql: str) -> Any:
    """Execute final SQL (no parameter binding) and return the cursor."""
    cur = conn.cursor()
    cur.execute(sql)
    return cur


def cursor_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor result to list of dicts. Works for every supported driver."""
    desc = cursor.description
    if not desc:
        return []
    names = [d[0] for d in desc]
    return [dict(zip(names, row, strict=True)) for row in cursor.fetchall()]


def fetch_one_dict(cursor: Any) -> dict[str, Any] | None:
    """Fetch the next row as a dict; None when the result set is exhausted."""
    desc = cursor.description
    if not desc:
        return None
    row = cursor.fetchone()
    if row is None:
        return None
    return dict(zip([d[0] for d in desc], row, strict=True))


def detect_product_type(conn: Any) -> ProductTypeEnum | None:
    """Product of a driver connection, from its class; None when unrecognised."""
    if isinstance(conn, MySQLConnection):
        return ProductTypeEnum.MYSQL
    if isinstance(conn, psycopg.Connection):
        return ProductTypeEnum.POSTGRES
    if isinstance(conn, sqlite3.Connection):
        return ProductTypeEnum.SQLITE
    if isinstance(conn, TrinoConnection):
        return ProductTypeEnum.TRINO
    return None


def make_quote(conn: Any, product_type: ProductTypeEnum | None) -> Callable[[Any], str]:
    """
    Return the literal escaper for *conn*.

    MySQL and PostgreSQL use the driver's own escaping so quoting follows the
    server's rules; SQLite and Trino use ``quote_literal``. Without
    *product_type* the product is detected from the connection class; an
    unrecognised connection raises ValueError.
    """
    product_type = product_type or detect_product_type(conn)
    if product_type is None:
        raise ValueError(
            f"Cannot choose a literal escaper for {type(conn).__name__}; "
            f"pass product_type or quote"
        )
    if product_type == ProductTypeEnum.MYSQL:
        return conn.escape
    if product_type == ProductTypeEnum.POSTGRES:
        return lambda value: pg_sql.Literal(value).as_string(conn)
    return quote_literal


def last_insert_id(conn: Any, cursor: Any, product_type: ProductTypeEnum | None) -> Any:
    """Id generated by the last INSERT on *conn*; None when the driver has none."""
    if product_type == ProductTypeEnum.POSTGRES:
        cur = execute(conn, "SELECT lastval()")
        try:
            row = cur.fetchone()
        finally:
            cur.close()
        return row[0] if row else None
    if cursor is None:
        return None
    return getattr(cursor, "lastrowid", None)
