"""
Table descriptors for tablesync.

This module defines:
- How a single column is declared (type, nullability, default, flags)
- How a table is declared (name + ordered columns)
- How the legacy string-keyed property bags are parsed into both

A TableDescriptor is the SINGLE source of truth for schema sync,
write validation and filter compilation. Its names are the only
identifiers ever interpolated into SQL text, so they are validated here.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass

from tablesync.core.errors import DescriptorError

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
# type name, an optional argument list of words or quoted literals, modifiers
_TYPE_PATTERN = re.compile(
    r"^[A-Za-z][A-Za-z0-9_ ]*(?:\((?:[A-Za-z0-9_ ,]|'[^'\\]*')*\))?[A-Za-z0-9_ ]*$"
)

# Recognized keys of the property-bag form
PROP_TYPE = "TYPE"
PROP_NAME = "NAME"
PROP_NOT_NULL = "NOT_NULL"
PROP_DEFAULT = "DEFAULT"
PROP_INDEX = "INDEX"
PROP_UNIQUE = "UNIQUE"
PROP_AUTO_INCREMENT = "AUTO_INCREMENT"

KNOWN_PROPERTIES = frozenset(
    {
        PROP_TYPE,
        PROP_NAME,
        PROP_NOT_NULL,
        PROP_DEFAULT,
        PROP_INDEX,
        PROP_UNIQUE,
        PROP_AUTO_INCREMENT,
    }
)


def is_identifier(name: str) -> bool:
    """Check whether a name is a plain SQL identifier."""
    return bool(_IDENTIFIER_PATTERN.match(name))


def _flag(value: str | None, truthy: tuple[str, ...] = ("true",)) -> bool:
    return value is not None and value.strip().lower() in truthy


# -----------------------------
# Column Descriptor
# -----------------------------


@dataclass(frozen=True)
class ColumnDescriptor:
    """Declared shape of a single column."""

    type: str  # storage-engine type (e.g. "varchar(255)")
    not_null: bool = False
    default: str | None = None  # raw SQL literal, None means no default
    index: bool = False  # advisory
    unique: bool = False  # advisory
    auto_increment: bool = False
    label: str = ""  # human-readable name, informational only

    @property
    def is_required(self) -> bool:
        """A value must be supplied on write for this column."""
        return self.not_null and self.default is None and not self.auto_increment

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "ColumnDescriptor":
        """
        Build a column from the string-keyed property bag.

        Example:
            {"TYPE": "varchar(255)", "NOT_NULL": "true", "DEFAULT": ""}

        Raises:
            DescriptorError: On unknown keys or a missing TYPE.
        """
        unknown = set(properties) - KNOWN_PROPERTIES
        if unknown:
            raise DescriptorError(
                f"Unknown column properties: {', '.join(sorted(unknown))}"
            )

        column_type = properties.get(PROP_TYPE, "").strip()
        if not column_type:
            raise DescriptorError("Column property 'TYPE' is required")

        default = properties.get(PROP_DEFAULT, "")
        return cls(
            type=column_type,
            not_null=_flag(properties.get(PROP_NOT_NULL)),
            default=default if default != "" else None,
            index=_flag(properties.get(PROP_INDEX), ("yes", "true")),
            unique=_flag(properties.get(PROP_UNIQUE), ("yes", "true")),
            auto_increment=_flag(properties.get(PROP_AUTO_INCREMENT)),
            label=properties.get(PROP_NAME, ""),
        )


# -----------------------------
# Table Descriptor
# -----------------------------


@dataclass(frozen=True)
class TableDescriptor:
    """
    Declared shape of a table.

    Columns keep declaration order, which is also the order used
    for generated statements.
    """

    name: str
    columns: dict[str, ColumnDescriptor]

    def __post_init__(self) -> None:
        if not is_identifier(self.name):
            raise DescriptorError(f"Invalid table name '{self.name}'")
        if not self.columns:
            raise DescriptorError(f"Table '{self.name}' declares no columns")

        auto_columns = []
        for column_name, column in self.columns.items():
            if not is_identifier(column_name):
                raise DescriptorError(
                    f"Invalid column name '{column_name}' in table '{self.name}'"
                )
            if not _TYPE_PATTERN.match(column.type):
                raise DescriptorError(
                    f"Invalid type '{column.type}' for column '{column_name}'"
                )
            if column.auto_increment:
                auto_columns.append(column_name)

        if len(auto_columns) > 1:
            raise DescriptorError(
                f"Table '{self.name}' declares more than one AUTO_INCREMENT "
                f"column: {', '.join(auto_columns)}"
            )

    @classmethod
    def from_structure(
        cls, name: str, structure: Mapping[str, Mapping[str, str]]
    ) -> "TableDescriptor":
        """Build a table from a mapping of column name to property bag."""
        columns = {}
        for column_name, properties in structure.items():
            try:
                columns[column_name] = ColumnDescriptor.from_properties(properties)
            except DescriptorError as exc:
                raise DescriptorError(f"Column '{column_name}': {exc}") from exc
        return cls(name=name, columns=columns)

    # -------------------------
    # Lookup Methods
    # -------------------------

    @property
    def column_names(self) -> list[str]:
        """List column names in declaration order."""
        return list(self.columns.keys())

    @property
    def auto_increment_column(self) -> str | None:
        """Name of the auto-increment (primary key candidate) column."""
        for column_name, column in self.columns.items():
            if column.auto_increment:
                return column_name
        return None

    @property
    def required_columns(self) -> list[str]:
        """Columns that must be supplied on every write."""
        return [name for name, column in self.columns.items() if column.is_required]

    def has_column(self, column_name: str) -> bool:
        """Check if a column is declared."""
        return column_name in self.columns
