"""
Data-definition statements for tablesync.

Each statement is a SchemaChange carrying both the exact SQL text
(MySQL-family grammar) and the structured intent behind it, so stores
can execute it and tests can inspect it.

Only descriptor-validated identifiers and type strings are interpolated.
DEFAULT values are raw SQL literals taken from the descriptor.
"""

from dataclasses import dataclass
from enum import Enum

from tablesync.core.descriptor.models import ColumnDescriptor, TableDescriptor


class SchemaAction(str, Enum):
    """Kinds of data-definition statements the synchronizer issues."""

    CREATE_TABLE = "create_table"
    MODIFY_COLUMN = "modify_column"
    ADD_COLUMN = "add_column"
    ADD_PRIMARY_KEY = "add_primary_key"


@dataclass(frozen=True)
class SchemaChange:
    """One data-definition statement."""

    action: SchemaAction
    table: str
    sql: str
    columns: tuple[tuple[str, ColumnDescriptor], ...] = ()
    primary_key: str | None = None

    def __str__(self) -> str:
        return self.sql


def column_definition(
    name: str, column: ColumnDescriptor, primary_key: bool = False
) -> str:
    """Render `name type [NOT NULL] [DEFAULT x] [AUTO_INCREMENT] [PRIMARY KEY]`."""
    parts = [name, column.type]
    if column.not_null:
        parts.append("NOT NULL")
    if column.default is not None:
        parts.append(f"DEFAULT {column.default}")
    if column.auto_increment:
        parts.append("AUTO_INCREMENT")
    if primary_key:
        parts.append("PRIMARY KEY")
    return " ".join(parts)


def create_table(descriptor: TableDescriptor) -> SchemaChange:
    """CREATE TABLE with every column, keyed on the auto-increment column if any."""
    definitions = [
        column_definition(name, column) for name, column in descriptor.columns.items()
    ]
    primary_key = descriptor.auto_increment_column
    if primary_key is not None:
        definitions.append(f"PRIMARY KEY ({primary_key})")

    return SchemaChange(
        action=SchemaAction.CREATE_TABLE,
        table=descriptor.name,
        sql=f"CREATE TABLE {descriptor.name} ({', '.join(definitions)})",
        columns=tuple(descriptor.columns.items()),
        primary_key=primary_key,
    )


def modify_column(
    descriptor: TableDescriptor, name: str, primary_key: bool = False
) -> SchemaChange:
    """
    ALTER TABLE .. MODIFY carrying the full desired definition.

    An auto-increment column must already be a key when it is modified.
    When it is not, pass primary_key=True to key it in the same statement.
    """
    column = descriptor.columns[name]
    definition = column_definition(name, column, primary_key=primary_key)
    return SchemaChange(
        action=SchemaAction.MODIFY_COLUMN,
        table=descriptor.name,
        sql=f"ALTER TABLE {descriptor.name} MODIFY {definition}",
        columns=((name, column),),
        primary_key=name if primary_key else None,
    )


def add_column(descriptor: TableDescriptor, name: str) -> SchemaChange:
    """
    ALTER TABLE .. ADD COLUMN carrying the full desired definition.

    An auto-increment column must be a key at the moment it is added,
    so it is declared PRIMARY KEY inline.
    """
    column = descriptor.columns[name]
    definition = column_definition(name, column, primary_key=column.auto_increment)
    return SchemaChange(
        action=SchemaAction.ADD_COLUMN,
        table=descriptor.name,
        sql=f"ALTER TABLE {descriptor.name} ADD COLUMN {definition}",
        columns=((name, column),),
        primary_key=name if column.auto_increment else None,
    )


def add_primary_key(descriptor: TableDescriptor, name: str) -> SchemaChange:
    return SchemaChange(
        action=SchemaAction.ADD_PRIMARY_KEY,
        table=descriptor.name,
        sql=f"ALTER TABLE {descriptor.name} ADD PRIMARY KEY ({name})",
        primary_key=name,
    )
