"""
Errors raised while compiling a placeholder template.

Both are ``ValueError`` subclasses: they signal bad input, never a transient
fault, and are raised before any value is escaped.
"""


class PlaceholderError(ValueError):
    """Base class for template compilation errors."""


class ArityMismatch(PlaceholderError):
    """Number of placeholders in the template differs from the number of parameters."""

    def __init__(self, expected: int, actual: int, template: str) -> None:
        self.expected = expected
        self.actual = actual
        self.template = template
        super().__init__(
            f"Number of args ({actual}) doesn't match number of placeholders "
            f"({expected}) in [{template}]"
        )


class TypeMismatch(PlaceholderError):
    """Parameter value has the wrong shape for its placeholder (``?a`` / ``?A``)."""

    def __init__(self, token_kind: str, actual_type: str, expected: str) -> None:
        self.token_kind = token_kind
        self.actual_type = actual_type
        super().__init__(f"{token_kind} placeholder expects {expected}, {actual_type} given")
