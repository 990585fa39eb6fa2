"""
Per-placeholder converters for the SQL template compiler.

Each converter takes the raw parameter and returns the exact text spliced into
the query. ``?s``, ``?a`` and ``?A`` go through the connection's ``quote``;
``?i`` and ``?f`` only coerce numbers and never call it.

``?t`` and ``?p`` are NOT escaped: the caller owns the safety of identifiers
and raw fragments passed through them.
"""

import math
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pydbal.engines.sql.exceptions import TypeMismatch
from pydbal.engines.sql.placeholders import PlaceholderKind

Quote = Callable[[Any], str]

# Single-quote escape for SQL strings
_SQL_QUOTE_ESCAPE = str.maketrans({"'": "''"})

# Leading numeric prefix of a string, the part a loose numeric cast keeps.
_INT_PREFIX = re.compile(r"\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def quote_literal(value: Any) -> str:
    """
    Generic SQL literal. None -> NULL, bool -> TRUE/FALSE, finite numbers bare,
    bytes as an X'..' hex literal, anything else single-quoted with ``'`` doubled.

    Used for drivers that do not offer their own escaping (SQLite, Trino).
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value) if math.isfinite(value) else "NULL"
    if isinstance(value, (bytes, bytearray)):
        return f"X'{value.hex()}'"
    s = str(value).translate(_SQL_QUOTE_ESCAPE)
    return f"'{s}'"


def _type_name(value: Any) -> str:
    return type(value).__name__


def to_int(value: Any) -> int:
    """
    Loose integer cast: ints pass through, floats truncate, strings keep
    their leading numeric part (``"12abc"`` -> 12), anything else -> 0.
    """
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, (bytes, bytearray)):
        value = value.decode(errors="replace")
    if isinstance(value, str):
        m = _FLOAT_PREFIX.match(value)
        if m is None:
            return 0
        text = m.group(0)
        if _INT_PREFIX.fullmatch(text):
            return int(text)
        return to_int(float(text))
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def to_float(value: Any) -> float:
    """
    Loose float cast. For strings every ``,`` is read as the decimal
    separator (``"1,5"`` -> 1.5) and the leading numeric part is kept.
    NaN and infinities become 0.0.
    """
    if isinstance(value, float):
        return value if math.isfinite(value) else 0.0
    if isinstance(value, (bytes, bytearray)):
        value = value.decode(errors="replace")
    if isinstance(value, str):
        m = _FLOAT_PREFIX.match(value.replace(",", "."))
        return to_float(float(m.group(0))) if m else 0.0
    try:
        return to_float(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0.0


def sql_string(value: Any, quote: Quote) -> str:
    return quote(value)


def sql_int(value: Any, quote: Quote) -> str:
    return str(to_int(value))


def sql_float(value: Any, quote: Quote) -> str:
    return repr(to_float(value))


def check_shape(kind: PlaceholderKind, value: Any) -> None:
    """Raise TypeMismatch when *value* cannot feed a ``?a`` or ``?A`` placeholder."""
    if kind == PlaceholderKind.ARRAY:
        if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(
            value, Sequence
        ):
            raise TypeMismatch(kind.value, _type_name(value), "array")
    elif kind == PlaceholderKind.ASSOC:
        if not isinstance(value, Mapping):
            raise TypeMismatch(kind.value, _type_name(value), "associative array")


def in_list(value: Any, quote: Quote) -> str:
    """``['a', 'b']`` -> ``'a', 'b'`` for use inside ``IN (...)``."""
    check_shape(PlaceholderKind.ARRAY, value)
    return ", ".join(quote(v) for v in value)


def set_list(value: Any, quote: Quote) -> str:
    """Mapping -> backticked ``field=value`` pairs for ``SET``, values quoted."""
    check_shape(PlaceholderKind.ASSOC, value)
    return ", ".join(f"`{field}`={quote(v)}" for field, v in value.items())


def sql_identifier(value: Any, quote: Quote) -> str:
    """Backtick-wrap a table/column name. Not escaped: trusted input only."""
    return f"`{value}`"


def sql_raw(value: Any, quote: Quote) -> str:
    """Insert a pre-built SQL fragment verbatim. NEVER use on untrusted input."""
    return str(value)


SQL_FILTERS: dict[PlaceholderKind, Callable[[Any, Quote], str]] = {
    PlaceholderKind.STRING: sql_string,
    PlaceholderKind.INT: sql_int,
    PlaceholderKind.FLOAT: sql_float,
    PlaceholderKind.ARRAY: in_list,
    PlaceholderKind.ASSOC: set_list,
    PlaceholderKind.TABLE: sql_identifier,
    PlaceholderKind.RAW: sql_raw,
}


def convert(kind: PlaceholderKind, value: Any, quote: Quote) -> str:
    """Convert *value* for placeholder *kind*."""
    return SQL_FILTERS[kind](value, quote)
