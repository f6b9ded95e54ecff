"""Application configuration settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration values for tablesync."""

    # Database
    database_url: str = Field(
        default="mysql+pymysql://root:@localhost:3306/tablesync",
        description="SQLAlchemy URL of the store holding the managed tables",
    )
    echo_sql: bool = Field(default=False, description="Echo SQL issued by the engine")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level for scripts")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
