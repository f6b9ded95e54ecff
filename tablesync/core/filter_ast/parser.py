"""
Filter parser for tablesync.

Turns the mapping-based filter DSL into a FilterGroup tree:

    {
        "name": "Bob",             # name = 'Bob'
        "email%": "@example.com",  # email LIKE '%@example.com%'
        "[OR]": {"id>": 1, "id<": 2},
        "[OR]second": {...},       # any suffix after the tag keeps keys distinct
    }

Only the key conventions are interpreted here; column existence is
checked by the compiler.
"""

from collections.abc import Mapping
from typing import Any

from tablesync.core.errors import FilterSyntaxError
from tablesync.core.filter_ast.models import (
    FilterGroup,
    FilterLeaf,
    FilterLogic,
    FilterNode,
    FilterOperator,
)

# Key prefixes that open a nested group
GROUP_TAGS: dict[str, FilterLogic] = {
    "[OR]": FilterLogic.OR,
    "[AND]": FilterLogic.AND,
}

# Checked in order; the first matching suffix wins
SUFFIX_OPERATORS: tuple[tuple[str, FilterOperator], ...] = (
    (">", FilterOperator.GT),
    ("<", FilterOperator.LT),
    ("=", FilterOperator.EQ),
    ("%", FilterOperator.LIKE),
)


def group_logic_for(key: str) -> FilterLogic | None:
    """Return the group logic a key opens, or None for a column key."""
    for tag, logic in GROUP_TAGS.items():
        if key.startswith(tag):
            return logic
    return None


def split_column_key(key: str) -> tuple[str, FilterOperator]:
    """Split a column key into (column, operator) using its suffix."""
    for suffix, operator in SUFFIX_OPERATORS:
        if key.endswith(suffix):
            return key[: -len(suffix)], operator
    return key, FilterOperator.EQ


class FilterParser:
    """Builds FilterGroup trees from filter mappings."""

    def parse(
        self,
        filters: Mapping[str, Any],
        logic: FilterLogic = FilterLogic.AND,
    ) -> FilterGroup:
        """
        Parse a filter mapping into a tree.

        Args:
            filters: The filter mapping. Entry order is preserved.
            logic: Connective for the top level of the mapping.

        Returns:
            The root FilterGroup.

        Raises:
            FilterSyntaxError: If a group tag does not map to a mapping.
        """
        children: list[FilterNode] = []

        for key, value in filters.items():
            group_logic = group_logic_for(key)
            if group_logic is not None:
                if not isinstance(value, Mapping):
                    raise FilterSyntaxError(
                        f"Group '{key}' must map to a filter mapping, "
                        f"got {type(value).__name__}"
                    )
                children.append(self.parse(value, group_logic))
                continue

            column, operator = split_column_key(key)
            children.append(FilterLeaf(column=column, operator=operator, value=value))

        return FilterGroup(logic=logic, children=children)
