"""
Placeholder template compiler.

Turns ``"... ?s ... ?i ..."`` plus positional parameters into a final SQL
string. Placeholders:

* ``?s`` string, escaped with the connection's ``quote``
* ``?i`` integer, numeric cast only
* ``?f`` float, numeric cast only (``,`` read as decimal separator)
* ``?a`` sequence for ``IN (...)``, each element quoted
* ``?A`` mapping for ``SET``, rendered as backticked field=value pairs
* ``?t`` identifier, wrapped in backticks and NOT escaped
* ``?p`` raw SQL fragment, inserted verbatim and NOT escaped

Examples::

    compile_template("SELECT * FROM users WHERE group = ?s AND points > ?i",
                     ["user", 7000], quote)
    # SELECT * FROM users WHERE group = 'user' AND points > 7000

    compile_template("SELECT * FROM user WHERE name IN(?a)", [["foo", "bar"]], quote)
    # SELECT * FROM user WHERE name IN('foo', 'bar')

    compile_template("INSERT INTO users SET ?A", [{"name": "User Name", "points": 7000}], quote)
    # INSERT INTO users SET `name`='User Name', `points`=7000

Compilation is all-or-nothing: the placeholder count and the shape of every
``?a`` / ``?A`` value are checked before ``quote`` is called for any value, so an
``ArityMismatch`` or ``TypeMismatch`` escapes nothing and leaves nothing behind.
Templates are scanned on every call; nothing is cached.
"""

from collections.abc import Sequence
from typing import Any

from pydbal.engines.sql.exceptions import ArityMismatch
from pydbal.engines.sql.filters import Quote, check_shape, convert
from pydbal.engines.sql.placeholders import split_template


def compile_template(template: str, parameters: Sequence[Any], quote: Quote) -> str:
    """Substitute *parameters* into *template* and return the final SQL."""
    items = split_template(template)
    expected = len(items) // 2
    if expected == 0:
        return template
    if expected != len(parameters):
        raise ArityMismatch(expected=expected, actual=len(parameters), template=template)

    tokens = list(zip(items[1::2], parameters))
    for kind, value in tokens:
        check_shape(kind, value)

    converted = [convert(kind, value, quote) for kind, value in tokens]
    parts = [items[0]]
    for text, literal in zip(converted, items[2::2]):
        parts.append(text)
        parts.append(literal)
    return "".join(parts)


class SQLTemplateCompiler:
    """Binds a ``quote`` escaper so callers only pass template and parameters."""

    def __init__(self, quote: Quote) -> None:
        self._quote = quote

    def compile(self, template: str, parameters: Sequence[Any]) -> str:
        return compile_template(template, parameters, self._quote)
