"""SQLAlchemy-backed Store implementation."""

from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.expression import Executable

from tablesync.core.errors import StoreError
from tablesync.core.schema_sync.statements import SchemaChange
from tablesync.core.store import (
    AUTO_INCREMENT_EXTRA,
    INDEX_KEY_ROLE,
    PRIMARY_KEY_ROLE,
    UNIQUE_KEY_ROLE,
    LiveColumn,
)

logger = logging.getLogger(__name__)


class SQLAlchemyStore:
    """
    Store over a SQLAlchemy Engine.

    Introspection goes through sqlalchemy.inspect() so it works on any
    dialect; every statement runs in its own transaction. The engine's
    pool makes one instance safe to share between callers.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    # -------------------------
    # Introspection
    # -------------------------

    def table_exists(self, table: str) -> bool:
        try:
            return inspect(self._engine).has_table(table)
        except SQLAlchemyError as exc:
            logger.error("Failed to check if table '%s' exists: %s", table, exc)
            raise StoreError(f"failed to check if table exists: {exc}") from exc

    def get_columns(self, table: str) -> dict[str, LiveColumn]:
        try:
            inspector = inspect(self._engine)
            columns = inspector.get_columns(table)
            primary_keys = set(
                inspector.get_pk_constraint(table).get("constrained_columns") or []
            )
            unique_columns = {
                constraint["column_names"][0]
                for constraint in inspector.get_unique_constraints(table)
                if len(constraint["column_names"]) == 1
            }
            indexed_columns = set()
            for index in inspector.get_indexes(table):
                names = [name for name in index["column_names"] if name]
                if not names:
                    continue
                if index.get("unique") and len(names) == 1:
                    unique_columns.add(names[0])
                else:
                    indexed_columns.add(names[0])

            live: dict[str, LiveColumn] = {}
            for col in columns:
                name = col["name"]
                if name in primary_keys:
                    key = PRIMARY_KEY_ROLE
                elif name in unique_columns:
                    key = UNIQUE_KEY_ROLE
                elif name in indexed_columns:
                    key = INDEX_KEY_ROLE
                else:
                    key = ""
                live[name] = LiveColumn(
                    name=name,
                    type=col["type"].compile(dialect=self._engine.dialect),
                    nullable=col["nullable"],
                    key=key,
                    default=col.get("default"),
                    extra=AUTO_INCREMENT_EXTRA if col.get("autoincrement") is True else "",
                )
            return live
        except SQLAlchemyError as exc:
            logger.error("Failed to show columns of '%s': %s", table, exc)
            raise StoreError(f"failed to show columns of '{table}': {exc}") from exc

    # -------------------------
    # Execution
    # -------------------------

    def execute_ddl(self, change: SchemaChange) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(text(change.sql))
        except SQLAlchemyError as exc:
            logger.error("Statement failed: %s (%s)", change.sql, exc)
            raise StoreError(str(exc)) from exc

    def execute(self, statement: Executable) -> int:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(statement)
                return result.rowcount
        except SQLAlchemyError as exc:
            logger.error("Statement failed: %s (%s)", statement, exc)
            raise StoreError(str(exc)) from exc
