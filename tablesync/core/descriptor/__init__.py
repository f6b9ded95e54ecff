"""Table descriptors for tablesync - declared columns and their constraints."""

from .models import ColumnDescriptor, TableDescriptor, is_identifier

__all__ = [
    "ColumnDescriptor",
    "TableDescriptor",
    "is_identifier",
]
