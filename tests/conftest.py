"""Shared fixtures: an in-memory Store that records every statement."""

import pytest
from sqlalchemy.sql.expression import Executable

from tablesync.core.descriptor.models import ColumnDescriptor, TableDescriptor
from tablesync.core.errors import StoreError
from tablesync.core.schema_sync.statements import SchemaAction, SchemaChange
from tablesync.core.store import AUTO_INCREMENT_EXTRA, PRIMARY_KEY_ROLE, LiveColumn


def live_column(name: str, column: ColumnDescriptor, key: str = "") -> LiveColumn:
    """The LiveColumn a store would report after applying a definition."""
    return LiveColumn(
        name=name,
        type=column.type,
        nullable=not column.not_null,
        key=key,
        default=column.default,
        extra=AUTO_INCREMENT_EXTRA if column.auto_increment else "",
    )


class InMemoryStore:
    """
    Store double.

    Keeps a simulated live schema, applies SchemaChanges to it, and
    records every DDL and DML statement it receives.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, LiveColumn]] = {}
        self.ddl: list[SchemaChange] = []
        self.dml: list[Executable] = []
        self.fail_on: SchemaAction | None = None
        self.rowcount = 1

    # Introspection

    def table_exists(self, table: str) -> bool:
        return table in self.tables

    def get_columns(self, table: str) -> dict[str, LiveColumn]:
        return dict(self.tables[table])

    # Execution

    def execute_ddl(self, change: SchemaChange) -> None:
        if self.fail_on == change.action:
            raise StoreError(f"simulated failure for {change.action.value}")
        self.ddl.append(change)

        columns = self.tables.setdefault(change.table, {})
        for name, column in change.columns:
            key = columns[name].key if name in columns else ""
            columns[name] = live_column(name, column, key)
        if change.primary_key is not None:
            current = columns[change.primary_key]
            columns[change.primary_key] = LiveColumn(
                name=current.name,
                type=current.type,
                nullable=False,
                key=PRIMARY_KEY_ROLE,
                default=current.default,
                extra=current.extra,
            )

    def execute(self, statement: Executable) -> int:
        self.dml.append(statement)
        return self.rowcount

    # Helpers

    def seed_table(
        self, descriptor: TableDescriptor, *names: str, key_primary: bool = True
    ) -> None:
        """Create a live table holding the given descriptor columns, as declared."""
        auto = descriptor.auto_increment_column
        self.tables[descriptor.name] = {
            name: live_column(
                name,
                descriptor.columns[name],
                PRIMARY_KEY_ROLE if key_primary and name == auto else "",
            )
            for name in names
        }


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def users_descriptor() -> TableDescriptor:
    """id auto-increment, name and email required."""
    return TableDescriptor(
        name="users",
        columns={
            "id": ColumnDescriptor(type="int", not_null=True, auto_increment=True),
            "name": ColumnDescriptor(type="varchar(255)", not_null=True),
            "email": ColumnDescriptor(type="varchar(255)", not_null=True),
        },
    )
