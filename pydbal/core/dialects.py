"""
Per-product connection defaults.

One frozen record per product; callers select it explicitly through
``ProductTypeEnum``. The table is read-only.
"""

from types import MappingProxyType
from typing import NamedTuple

from pydbal.models import ProductTypeEnum


class DialectConfig(NamedTuple):
    scheme: str
    default_port: int


DIALECTS = MappingProxyType(
    {
        ProductTypeEnum.MYSQL: DialectConfig(scheme="mysql", default_port=3306),
        ProductTypeEnum.POSTGRES: DialectConfig(scheme="pgsql", default_port=5432),
        ProductTypeEnum.TRINO: DialectConfig(scheme="trino", default_port=8080),
        ProductTypeEnum.SQLITE: DialectConfig(scheme="sqlite", default_port=0),
    }
)


def get_dialect(product_type: ProductTypeEnum | str) -> DialectConfig:
    """Return the DialectConfig for *product_type*; ValueError if unsupported."""
    try:
        return DIALECTS[ProductTypeEnum(product_type)]
    except (KeyError, ValueError):
        raise ValueError(f"Unsupported product_type: {product_type}") from None
