"""Schema synchronization for tablesync - reconcile live tables with descriptors."""

from .statements import SchemaAction, SchemaChange
from .synchronizer import (
    SchemaSynchronizer,
    SyncReport,
    column_needs_modify,
    normalize_default,
    normalize_type,
)

__all__ = [
    "SchemaAction",
    "SchemaChange",
    "SchemaSynchronizer",
    "SyncReport",
    "column_needs_modify",
    "normalize_default",
    "normalize_type",
]
