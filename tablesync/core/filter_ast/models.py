"""
Filter AST models for tablesync.

A filter is a tree of two node kinds:
- FilterLeaf: one comparison against one column
- FilterGroup: an ordered list of child nodes joined by AND or OR

The tree is produced by FilterParser from caller input and consumed
by FilterCompiler.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


# -----------------------------
# Enums
# -----------------------------


class FilterLogic(str, Enum):
    """Boolean connective joining the children of a group."""

    AND = "AND"
    OR = "OR"


class FilterOperator(str, Enum):
    """Supported comparison operators."""

    EQ = "="
    GT = ">"
    LT = "<"
    LIKE = "LIKE"


# -----------------------------
# Tree Nodes
# -----------------------------


class FilterLeaf(BaseModel):
    """
    A single column comparison.

    Examples:
        name = 'Bob'
        id > 1
        email LIKE '%@example.com%'
    """

    kind: Literal["leaf"] = "leaf"
    column: str
    operator: FilterOperator = FilterOperator.EQ
    value: Any = None


class FilterGroup(BaseModel):
    """
    A parenthesised group of nodes joined by one connective.

    Example:
        (id > 1 OR id < 2)
    """

    kind: Literal["group"] = "group"
    logic: FilterLogic = FilterLogic.AND
    children: list["FilterNode"] = Field(default_factory=list)


FilterNode = Annotated[Union[FilterLeaf, FilterGroup], Field(discriminator="kind")]

FilterGroup.model_rebuild()
