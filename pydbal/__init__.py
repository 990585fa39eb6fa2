"""
pydbal: placeholder SQL templates over DB-API connections.

Exports: Database, DBInterface, DataSource, ProductTypeEnum, compile_template
and the error types.
"""

from pydbal.database import Database, DBInterface
from pydbal.engines.sql import (
    ArityMismatch,
    PlaceholderError,
    SQLTemplateCompiler,
    TypeMismatch,
    compile_template,
)
from pydbal.exceptions import DatabaseConnectionError, NoActiveStatement
from pydbal.models import DataSource, ProductTypeEnum

__all__ = [
    "Database",
    "DBInterface",
    "DataSource",
    "ProductTypeEnum",
    "SQLTemplateCompiler",
    "compile_template",
    "PlaceholderError",
    "ArityMismatch",
    "TypeMismatch",
    "DatabaseConnectionError",
    "NoActiveStatement",
]
