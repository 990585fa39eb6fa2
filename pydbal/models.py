"""
Connection records: supported database products and DataSource.

The caller picks the product explicitly; the port falls back to the
dialect default (see ``pydbal.core.dialects``).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from pydbal.core.config import settings


class ProductTypeEnum(str, Enum):
    """Supported database product types (mysql, postgres, trino, sqlite)."""

    MYSQL = "mysql"
    POSTGRES = "postgres"
    TRINO = "trino"
    SQLITE = "sqlite"


class DataSource(BaseModel):
    """Where and how to connect. ``port=None`` means the dialect's default port."""

    product_type: ProductTypeEnum = Field(
        default_factory=lambda: ProductTypeEnum(settings.DEFAULT_PRODUCT_TYPE)
    )
    host: str | None = None
    port: int | None = None
    database: str
    username: str | None = None
    password: str = ""
    use_ssl: bool = False
    options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _fill_default_port(self) -> "DataSource":
        # Imported here: dialects depends on ProductTypeEnum from this module.
        from pydbal.core.dialects import get_dialect

        if self.port is None:
            self.port = get_dialect(self.product_type).default_port
        return self
