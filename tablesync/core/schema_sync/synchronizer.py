"""
Schema synchronizer for tablesync.

Brings a live table in line with a TableDescriptor:
- creates the table when it does not exist
- modifies columns whose type, nullability or default drifted
- adds missing columns
- makes the auto-increment column the primary key

Synchronization is additive and corrective. Columns that exist only in
the live table are never touched, and nothing is ever dropped.

Concurrent synchronize() calls against the same table can race.
Callers must serialize them (leader-only migration, advisory lock or a
startup barrier) before write traffic starts.
"""

import logging
import re
from dataclasses import dataclass

from tablesync.core.descriptor.models import ColumnDescriptor, TableDescriptor
from tablesync.core.errors import SchemaSyncError, StoreError
from tablesync.core.schema_sync import statements
from tablesync.core.schema_sync.statements import SchemaAction, SchemaChange
from tablesync.core.store import LiveColumn, Store

logger = logging.getLogger(__name__)

_SEPARATOR_SPACING = re.compile(r"\s*([(),])\s*")
_INT_DISPLAY_WIDTH = re.compile(r"^(tinyint|smallint|mediumint|int|bigint)\(\d+\)")
_TYPE_ALIASES = {"integer": "int"}

_FAILURE_MESSAGES: dict[SchemaAction, str] = {
    SchemaAction.CREATE_TABLE: "failed to create table",
    SchemaAction.MODIFY_COLUMN: "failed to alter table structure",
    SchemaAction.ADD_COLUMN: "failed to add new column",
    SchemaAction.ADD_PRIMARY_KEY: "failed to set primary key",
}


# -----------------------------
# Live vs Desired Comparison
# -----------------------------


def normalize_type(type_: str) -> str:
    """
    Normalize a type string for comparison.

    Engines report types differently from how they were declared
    ("INTEGER", "int(11)", "decimal(10, 2)"); all of these compare equal
    to their plain lowercase declaration.
    """
    normalized = " ".join(type_.lower().split())
    normalized = _SEPARATOR_SPACING.sub(r"\1", normalized)

    base, _, rest = normalized.partition("(")
    head, space, tail = base.partition(" ")
    head = _TYPE_ALIASES.get(head, head)
    normalized = head + space + tail + (f"({rest}" if rest else "")

    match = _INT_DISPLAY_WIDTH.match(normalized)
    if match:
        normalized = match.group(1) + normalized[match.end():]
    return normalized


def normalize_default(default: str | None) -> str | None:
    """Strip surrounding single quotes from a default literal."""
    if default is None:
        return None
    value = default.strip()
    if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        value = value[1:-1]
    return value


def column_needs_modify(column: ColumnDescriptor, live: LiveColumn) -> bool:
    """
    Check whether a live column drifted from its declaration.

    Only type, nullability and a declared default are compared. Key role
    and the live auto-increment attribute are not: an existing column that
    lacks AUTO_INCREMENT is left as it is.
    """
    if normalize_type(column.type) != normalize_type(live.type):
        return True
    if column.not_null and live.nullable:
        return True
    if column.default is not None and normalize_default(
        column.default
    ) != normalize_default(live.default):
        return True
    return False


# -----------------------------
# Result
# -----------------------------


@dataclass(frozen=True)
class SyncReport:
    """What a synchronize() call did."""

    table: str
    created: bool = False
    changes: tuple[SchemaChange, ...] = ()

    @property
    def in_sync(self) -> bool:
        """True when the table already matched and nothing was executed."""
        return not self.changes


# -----------------------------
# Synchronizer
# -----------------------------


class SchemaSynchronizer:
    """Reconciles live tables against descriptors through a Store."""

    def __init__(self, store: Store):
        self._store = store

    def plan(self, descriptor: TableDescriptor) -> list[SchemaChange]:
        """
        Compute the statements synchronize() would issue, without executing them.

        Args:
            descriptor: The desired table shape.

        Returns:
            Statements in execution order. Empty when already in sync.

        Raises:
            StoreError: If introspection fails.
        """
        if not self._store.table_exists(descriptor.name):
            return [statements.create_table(descriptor)]

        live_columns = self._store.get_columns(descriptor.name)
        return self._plan_alterations(descriptor, live_columns)

    def synchronize(self, descriptor: TableDescriptor) -> SyncReport:
        """
        Bring the live table in line with the descriptor.

        Statements run one at a time; the first failure stops the run.
        Statements that already succeeded are not rolled back.

        Args:
            descriptor: The desired table shape.

        Returns:
            SyncReport listing the executed statements.

        Raises:
            SchemaSyncError: If a data-definition statement fails.
            StoreError: If introspection fails.
        """
        changes = self.plan(descriptor)
        if not changes:
            logger.debug("Table '%s' already in sync", descriptor.name)
            return SyncReport(table=descriptor.name)

        for change in changes:
            self._apply(change)

        created = changes[0].action == SchemaAction.CREATE_TABLE
        return SyncReport(table=descriptor.name, created=created, changes=tuple(changes))

    # -------------------------
    # Planning
    # -------------------------

    def _plan_alterations(
        self, descriptor: TableDescriptor, live_columns: dict[str, LiveColumn]
    ) -> list[SchemaChange]:
        changes: list[SchemaChange] = []
        keyed_inline: set[str] = set()

        for name, column in descriptor.columns.items():
            live = live_columns.get(name)
            if live is None:
                change = statements.add_column(descriptor, name)
            elif column_needs_modify(column, live):
                # An unkeyed auto-increment column is keyed by its MODIFY
                change = statements.modify_column(
                    descriptor,
                    name,
                    primary_key=column.auto_increment and not live.is_primary_key,
                )
            else:
                continue
            if change.primary_key is not None:
                keyed_inline.add(name)
            changes.append(change)

        primary_key = descriptor.auto_increment_column
        if primary_key is not None and primary_key not in keyed_inline:
            live = live_columns.get(primary_key)
            if live is None or not live.is_primary_key:
                changes.append(statements.add_primary_key(descriptor, primary_key))

        return changes

    # -------------------------
    # Execution
    # -------------------------

    def _apply(self, change: SchemaChange) -> None:
        logger.info("Synchronizing table '%s': %s", change.table, change.sql)
        try:
            self._store.execute_ddl(change)
        except StoreError as exc:
            raise SchemaSyncError(
                f"{_FAILURE_MESSAGES[change.action]}: {exc}", change.sql
            ) from exc
