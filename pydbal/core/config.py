"""
Settings for pydbal, read from ``PYDBAL_*`` environment variables or ``.env``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PYDBAL_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Seconds to wait while opening a driver connection.
    EXTERNAL_DB_CONNECT_TIMEOUT: int = 10
    DEFAULT_PRODUCT_TYPE: str = "mysql"


settings = Settings()
