"""Database access for tablesync."""

from tablesync.db.base import get_database_url, get_engine
from tablesync.db.store import SQLAlchemyStore

__all__ = ["SQLAlchemyStore", "get_database_url", "get_engine"]
