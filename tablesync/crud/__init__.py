"""Record writers for tablesync."""

from .users import PROTECTED_USER_ID, USER_DESCRIPTOR, UserRecordWriter
from .writer import RecordId, RecordWriter, TableRecordWriter

__all__ = [
    "PROTECTED_USER_ID",
    "RecordId",
    "RecordWriter",
    "TableRecordWriter",
    "USER_DESCRIPTOR",
    "UserRecordWriter",
]
