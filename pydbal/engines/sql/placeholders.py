"""
Placeholder scanner for ``?x`` SQL templates.

Splits a template into literal segments and placeholder tokens in one pass.
Only the seven markers in ``PlaceholderKind`` are tokens; any other ``?``
(``??``, ``?x``, a trailing ``?``) is literal text.
"""

from enum import Enum


class PlaceholderKind(str, Enum):
    """Two-character placeholder markers and the conversion each one selects."""

    STRING = "?s"
    INT = "?i"
    FLOAT = "?f"
    ARRAY = "?a"
    ASSOC = "?A"
    TABLE = "?t"
    RAW = "?p"


_KINDS_BY_LETTER: dict[str, PlaceholderKind] = {k.value[1]: k for k in PlaceholderKind}


def split_template(template: str) -> list[str | PlaceholderKind]:
    """
    Return ``[literal, token, literal, ..., token, literal]``.

    The result always starts and ends with a literal (possibly empty), so a
    template with N placeholders yields ``2 * N + 1`` items.
    """
    items: list[str | PlaceholderKind] = []
    start = 0
    i = 0
    length = len(template)

    while i < length:
        if template[i] == "?" and i + 1 < length:
            kind = _KINDS_BY_LETTER.get(template[i + 1])
            if kind is not None:
                items.append(template[start:i])
                items.append(kind)
                i += 2
                start = i
                continue
        i += 1

    items.append(template[start:])
    return items


def count_placeholders(template: str) -> int:
    """Number of placeholder tokens in *template*."""
    return len(split_template(template)) // 2
