"""SQLAlchemy engine configuration."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from tablesync.core.config import get_settings


def get_database_url() -> str:
    """Return the database URL from settings."""

    return get_settings().database_url


def get_engine(url: str | None = None) -> Engine:
    """Create a SQLAlchemy engine for the configured database."""

    return create_engine(url or get_database_url(), echo=get_settings().echo_sql)
