"""
Write validation for tablesync.

Checks that every required column of a TableDescriptor is present
before a record is written.
"""

from collections.abc import Mapping
from typing import Any

from tablesync.core.descriptor.models import TableDescriptor
from tablesync.core.errors import RecordValidationError


class RequiredFieldValidator:
    """
    Validates write payloads against a table descriptor.

    A column is required when it is NOT NULL, has no default and is
    not auto-increment. The check runs against the whole descriptor,
    so an update must also carry every required column.
    """

    def __init__(self, descriptor: TableDescriptor):
        self._descriptor = descriptor

    def missing_fields(self, fields: Mapping[str, Any]) -> list[str]:
        """List required columns absent from the payload, in declaration order."""
        return [name for name in self._descriptor.required_columns if name not in fields]

    def validate(self, fields: Mapping[str, Any]) -> None:
        """
        Validate the payload.

        Args:
            fields: Column values about to be written.

        Raises:
            RecordValidationError: If any required column is missing.
        """
        missing = self.missing_fields(fields)
        if not missing:
            return

        if len(missing) == 1:
            message = f"field '{missing[0]}' cannot be null"
        else:
            names = ", ".join(f"'{name}'" for name in missing)
            message = f"fields {names} cannot be null"
        raise RecordValidationError(message, fields=tuple(missing))
