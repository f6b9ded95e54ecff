"""User records: the users table descriptor and its writer policy."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tablesync.core.descriptor.models import TableDescriptor
from tablesync.core.errors import PermissionDeniedError
from tablesync.core.filter_ast.compiler import CompiledFilter
from tablesync.core.filter_ast.models import FilterLogic
from tablesync.core.schema_sync.synchronizer import SyncReport
from tablesync.core.store import Store
from tablesync.crud.writer import RecordId, RecordWriter, TableRecordWriter

logger = logging.getLogger(__name__)

# The bootstrap account; it can never be deleted
PROTECTED_USER_ID = "1"

USER_DESCRIPTOR = TableDescriptor.from_structure(
    "users",
    {
        "id": {
            "TYPE": "int",
            "NAME": "ID",
            "NOT_NULL": "true",
            "DEFAULT": "",
            "INDEX": "yes",
            "UNIQUE": "yes",
            "AUTO_INCREMENT": "true",
        },
        "name": {
            "TYPE": "varchar(255)",
            "NAME": "Name",
            "NOT_NULL": "true",
            "DEFAULT": "",
            "INDEX": "yes",
            "UNIQUE": "no",
            "AUTO_INCREMENT": "false",
        },
        "email": {
            "TYPE": "varchar(255)",
            "NAME": "Email",
            "NOT_NULL": "true",
            "DEFAULT": "",
            "INDEX": "no",
            "UNIQUE": "yes",
            "AUTO_INCREMENT": "false",
        },
    },
)


class UserRecordWriter:
    """
    RecordWriter for users.

    Delegates to a base writer and refuses to delete the protected user.
    """

    def __init__(self, base: RecordWriter):
        self._base = base

    @classmethod
    def for_store(cls, store: Store) -> UserRecordWriter:
        """Build a user writer over a generic writer for USER_DESCRIPTOR."""
        return cls(TableRecordWriter(store, USER_DESCRIPTOR))

    @property
    def descriptor(self) -> TableDescriptor:
        return self._base.descriptor

    def create(self, fields: Mapping[str, Any]) -> int:
        return self._base.create(fields)

    def update(self, record_id: RecordId, fields: Mapping[str, Any]) -> int:
        return self._base.update(record_id, fields)

    def delete(self, record_id: RecordId) -> int:
        """
        Delete a user.

        Raises:
            PermissionDeniedError: For the protected user. Nothing is executed.
        """
        if str(record_id) == PROTECTED_USER_ID:
            logger.warning("Refused to delete protected user %s", record_id)
            raise PermissionDeniedError(
                f"deletion forbidden for user with ID = {PROTECTED_USER_ID}",
                record_id=record_id,
            )
        return self._base.delete(record_id)

    def prepare_where(
        self, filters: Mapping[str, Any], logic: FilterLogic = FilterLogic.AND
    ) -> CompiledFilter:
        return self._base.prepare_where(filters, logic)

    def synchronize(self) -> SyncReport:
        return self._base.synchronize()
