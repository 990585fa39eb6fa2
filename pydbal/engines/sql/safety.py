"""
Static analysis for placeholder templates: flag potential injection risks.

``?t`` and ``?p`` splice their values without escaping. They are fine for
identifiers and fragments the application controls, but a warning helps
reviewers notice them. A ``?`` followed by a letter that is not a known
placeholder is also reported: it stays literal text, which is usually a typo
(``?d`` for ``?i``) that would otherwise surface as an arity error.

Usage::

    warnings = check_template_safety("SELECT * FROM ?t WHERE id = ?d")
    # [{"token": "?t", "line": 1, "message": "..."},
    #  {"token": "?d", "line": 1, "message": "..."}]
"""

from typing import Any

from pydbal.engines.sql.placeholders import PlaceholderKind, split_template

_UNESCAPED = {
    PlaceholderKind.TABLE: "is wrapped in backticks but not escaped",
    PlaceholderKind.RAW: "is inserted verbatim without escaping",
}


def _unknown_markers(segment: str) -> list[str]:
    """Return ``?x`` markers in a literal segment where ``x`` is a letter."""
    found: list[str] = []
    for i, ch in enumerate(segment[:-1]):
        if ch == "?" and segment[i + 1].isalpha():
            found.append(segment[i : i + 2])
    return found


def check_template_safety(template: str) -> list[dict[str, Any]]:
    """Analyse *template* and return warnings for unescaped and unknown placeholders.

    Each warning is a dict with ``token``, ``line`` and ``message`` keys.
    An empty list means no issues detected.
    """
    warnings: list[dict[str, Any]] = []

    for line_no, line_text in enumerate(template.split("\n"), start=1):
        for item in split_template(line_text):
            if isinstance(item, PlaceholderKind):
                reason = _UNESCAPED.get(item)
                if reason is None:
                    continue
                warnings.append(
                    {
                        "token": item.value,
                        "line": line_no,
                        "message": (
                            f"'{item.value}' {reason}. Only pass trusted "
                            f"identifiers or SQL fragments to it."
                        ),
                    }
                )
                continue
            for marker in _unknown_markers(item):
                warnings.append(
                    {
                        "token": marker,
                        "line": line_no,
                        "message": (
                            f"'{marker}' is not a placeholder and is kept as literal "
                            f"text. Known placeholders: "
                            f"{', '.join(k.value for k in PlaceholderKind)}."
                        ),
                    }
                )

    return warnings
