"""
Error taxonomy for tablesync.

Every error raised by the library derives from TableSyncError so callers
can catch the whole family, while still distinguishing "bad input"
(validation, unknown columns, filter syntax, permission) from
"bad environment" (schema sync, store).
"""

from typing import Any


class TableSyncError(Exception):
    """Base class for all tablesync errors."""

    pass


class DescriptorError(TableSyncError):
    """Raised when a table or column descriptor is invalid."""

    pass


class RecordValidationError(TableSyncError):
    """Raised when a write is missing required fields."""

    def __init__(self, message: str, fields: tuple[str, ...] = ()):
        super().__init__(message)
        self.fields = fields


class UnknownColumnError(TableSyncError):
    """A filter or write referenced a column the descriptor does not declare."""

    def __init__(self, column: str, table: str):
        super().__init__(f"Unknown field '{column}' for table '{table}'")
        self.column = column
        self.table = table


class FilterSyntaxError(TableSyncError):
    """Raised when a filter mapping is structurally malformed."""

    pass


class SchemaSyncError(TableSyncError):
    """
    Raised when a data-definition statement fails.

    Carries the exact statement text; the store error is chained
    as __cause__.
    """

    def __init__(self, message: str, statement: str):
        super().__init__(f"{message}; query: {statement}")
        self.statement = statement


class PermissionDeniedError(TableSyncError):
    """Raised when entity policy forbids a write."""

    def __init__(self, message: str, record_id: Any = None):
        super().__init__(message)
        self.record_id = record_id


class StoreError(TableSyncError):
    """Raised when the underlying storage call fails."""

    pass
