"""
Placeholder SQL template engine.

Exports: SQLTemplateCompiler, compile_template, split_template,
check_template_safety and the compilation errors.
"""

from pydbal.engines.sql.compiler import SQLTemplateCompiler, compile_template
from pydbal.engines.sql.exceptions import ArityMismatch, PlaceholderError, TypeMismatch
from pydbal.engines.sql.filters import quote_literal
from pydbal.engines.sql.placeholders import (
    PlaceholderKind,
    count_placeholders,
    split_template,
)
from pydbal.engines.sql.safety import check_template_safety

__all__ = [
    "SQLTemplateCompiler",
    "compile_template",
    "split_template",
    "count_placeholders",
    "check_template_safety",
    "quote_literal",
    "PlaceholderKind",
    "PlaceholderError",
    "ArityMismatch",
    "TypeMismatch",
]
