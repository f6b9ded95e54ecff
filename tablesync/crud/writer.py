"""
Record writers for tablesync.

A RecordWriter performs validated create/update/delete against one
table described by a TableDescriptor. TableRecordWriter is the generic
implementation; entity writers compose it and intercept the operations
their policy restricts.
"""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from sqlalchemy import column, delete, insert, table, update
from sqlalchemy.sql.expression import TableClause

from tablesync.core.descriptor.models import TableDescriptor, is_identifier
from tablesync.core.errors import (
    DescriptorError,
    RecordValidationError,
    UnknownColumnError,
)
from tablesync.core.filter_ast.compiler import CompiledFilter, FilterCompiler
from tablesync.core.filter_ast.models import FilterLogic
from tablesync.core.safety.validator import RequiredFieldValidator
from tablesync.core.schema_sync.synchronizer import SchemaSynchronizer, SyncReport
from tablesync.core.store import Store

logger = logging.getLogger(__name__)

RecordId = str | int


# -----------------------------
# Interface
# -----------------------------


class RecordWriter(Protocol):
    """Validated writes and filters for one table."""

    @property
    def descriptor(self) -> TableDescriptor: ...

    def create(self, fields: Mapping[str, Any]) -> int: ...

    def update(self, record_id: RecordId, fields: Mapping[str, Any]) -> int: ...

    def delete(self, record_id: RecordId) -> int: ...

    def prepare_where(
        self, filters: Mapping[str, Any], logic: FilterLogic = FilterLogic.AND
    ) -> CompiledFilter: ...

    def synchronize(self) -> SyncReport: ...


# -----------------------------
# Generic Writer
# -----------------------------


class TableRecordWriter:
    """
    Generic RecordWriter bound to a Store and a TableDescriptor.

    Statements are SQLAlchemy Core constructs over a lightweight table
    clause, so values are always bound parameters.
    """

    def __init__(
        self,
        store: Store,
        descriptor: TableDescriptor,
        primary_key: str = "id",
    ):
        """
        Initialize the writer.

        Args:
            store: Store that executes the statements.
            descriptor: Table the writer is bound to.
            primary_key: Single-column key used by update and delete.
        """
        if not is_identifier(primary_key):
            raise DescriptorError(f"Invalid primary key column '{primary_key}'")

        self._store = store
        self._descriptor = descriptor
        self._primary_key = primary_key
        self._table: TableClause = table(
            descriptor.name, *(column(name) for name in descriptor.column_names)
        )
        self._validator = RequiredFieldValidator(descriptor)
        self._compiler = FilterCompiler(descriptor)
        self._synchronizer = SchemaSynchronizer(store)

    @property
    def descriptor(self) -> TableDescriptor:
        return self._descriptor

    # -------------------------
    # Writes
    # -------------------------

    def create(self, fields: Mapping[str, Any]) -> int:
        """
        Insert one record covering every declared column.

        Declared columns missing from fields are written as NULL; only
        required columns must be present. Undeclared keys are ignored.

        Raises:
            RecordValidationError: If a required column is missing.
            StoreError: If the insert fails.
        """
        self._validator.validate(fields)

        ignored = [key for key in fields if not self._descriptor.has_column(key)]
        if ignored:
            logger.debug(
                "Ignoring fields not declared on '%s': %s",
                self._descriptor.name,
                ", ".join(ignored),
            )

        row = {name: fields.get(name) for name in self._descriptor.column_names}
        statement = insert(self._table).values(row)
        logger.debug("Creating record in '%s'", self._descriptor.name)
        return self._store.execute(statement)

    def update(self, record_id: RecordId, fields: Mapping[str, Any]) -> int:
        """
        Update the given columns of one record.

        Required columns are checked against the whole descriptor, so they
        must be supplied even when unchanged.

        Raises:
            RecordValidationError: If a required column is missing or
                there is nothing to update.
            UnknownColumnError: If fields name an undeclared column.
            StoreError: If the update fails.
        """
        self._validator.validate(fields)

        for key in fields:
            if not self._descriptor.has_column(key):
                raise UnknownColumnError(key, self._descriptor.name)
        if not fields:
            raise RecordValidationError("no fields to update")

        statement = (
            update(self._table)
            .where(column(self._primary_key) == record_id)
            .values(dict(fields))
        )
        logger.debug("Updating record %s in '%s'", record_id, self._descriptor.name)
        return self._store.execute(statement)

    def delete(self, record_id: RecordId) -> int:
        """Delete one record by primary key."""
        statement = delete(self._table).where(column(self._primary_key) == record_id)
        logger.debug("Deleting record %s from '%s'", record_id, self._descriptor.name)
        return self._store.execute(statement)

    # -------------------------
    # Filters & Schema
    # -------------------------

    def prepare_where(
        self, filters: Mapping[str, Any], logic: FilterLogic = FilterLogic.AND
    ) -> CompiledFilter:
        """Compile a filter mapping against this table."""
        return self._compiler.prepare_where(filters, logic)

    def synchronize(self) -> SyncReport:
        """Bring the live table in line with the descriptor."""
        return self._synchronizer.synchronize(self._descriptor)
