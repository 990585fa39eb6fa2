"""
Errors raised by the connection layer and the Database wrapper.

Template compilation errors live in ``pydbal.engines.sql.exceptions``.
"""


class DatabaseConnectionError(ConnectionError):
    """The driver could not open a connection. The driver error is ``__cause__``."""

    def __init__(self, product_type: str, host: str | None, message: str) -> None:
        self.product_type = product_type
        self.host = host
        super().__init__(f"Cannot connect to {product_type} at {host or 'local'}: {message}")


class NoActiveStatement(RuntimeError):
    """results()/result() was called before any query()."""
