"""
Storage interface consumed by tablesync.

The core never talks to a database directly; it talks to a Store.
tablesync.db.store.SQLAlchemyStore is the production implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sqlalchemy.sql.expression import Executable

    from tablesync.core.schema_sync.statements import SchemaChange

PRIMARY_KEY_ROLE = "PRI"
UNIQUE_KEY_ROLE = "UNI"
INDEX_KEY_ROLE = "MUL"
AUTO_INCREMENT_EXTRA = "auto_increment"


@dataclass(frozen=True)
class LiveColumn:
    """Metadata of a column as it currently exists in the store."""

    name: str
    type: str
    nullable: bool = True
    key: str = ""  # "PRI", "UNI", "MUL" or ""
    default: str | None = None
    extra: str = ""  # e.g. "auto_increment", reported but not reconciled

    @property
    def is_primary_key(self) -> bool:
        return self.key == PRIMARY_KEY_ROLE


class Store(Protocol):
    """Capabilities tablesync needs from a relational store."""

    def table_exists(self, table: str) -> bool:
        """Check whether a table exists."""
        ...

    def get_columns(self, table: str) -> dict[str, LiveColumn]:
        """Introspect the live columns of an existing table, keyed by name."""
        ...

    def execute_ddl(self, change: SchemaChange) -> None:
        """Execute a data-definition statement."""
        ...

    def execute(self, statement: Executable) -> int:
        """Execute a parameterized data-manipulation statement, returning the row count."""
        ...
