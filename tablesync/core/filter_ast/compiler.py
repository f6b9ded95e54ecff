"""
Filter compiler for tablesync.

Transforms a FilterGroup tree into a SQLAlchemy boolean clause bound to
the columns of one TableDescriptor.

Values are always bound parameters; only descriptor-validated column
names reach the SQL text. Unknown columns do not abort compilation:
they are collected and the rest of the tree still compiles.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import and_, column, or_
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.elements import ColumnElement

from tablesync.core.descriptor.models import TableDescriptor
from tablesync.core.errors import UnknownColumnError
from tablesync.core.filter_ast.models import (
    FilterGroup,
    FilterLeaf,
    FilterLogic,
    FilterOperator,
)
from tablesync.core.filter_ast.parser import FilterParser


# -----------------------------
# Result
# -----------------------------


@dataclass
class CompiledFilter:
    """
    A compiled predicate plus every error found while compiling it.

    clause is None when nothing valid was left to compile.
    """

    clause: ColumnElement | None = None
    errors: list[UnknownColumnError] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.clause is None

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def params(self) -> dict[str, Any]:
        """Bound parameter values keyed by placeholder name."""
        if self.clause is None:
            return {}
        return dict(self.clause.compile().params)

    def to_sql(self, literal: bool = False, dialect: Dialect | None = None) -> str:
        """
        Render the predicate as SQL text.

        Args:
            literal: Inline the values instead of placeholders.
                Use for display and logging only.
            dialect: Target dialect. Defaults to SQLAlchemy's generic one.

        Returns:
            The predicate text, or "" when the filter is empty.
        """
        if self.clause is None:
            return ""
        compile_kwargs = {"literal_binds": True} if literal else {}
        return str(self.clause.compile(dialect=dialect, compile_kwargs=compile_kwargs))


# -----------------------------
# Compiler
# -----------------------------


class FilterCompiler:
    """Compiles filter trees against a table descriptor."""

    def __init__(
        self,
        descriptor: TableDescriptor,
        parser: FilterParser | None = None,
    ):
        """
        Initialize the compiler.

        Args:
            descriptor: Table whose columns the filter may reference.
            parser: Parser for mapping input. A default one is used if not provided.
        """
        self._descriptor = descriptor
        self._parser = parser or FilterParser()

    def prepare_where(
        self,
        filters: Mapping[str, Any],
        logic: FilterLogic = FilterLogic.AND,
    ) -> CompiledFilter:
        """Parse a filter mapping and compile it."""
        return self.compile(self._parser.parse(filters, logic))

    def compile(self, node: FilterGroup | FilterLeaf) -> CompiledFilter:
        """
        Compile a filter tree.

        The root group is not parenthesised; nested groups are.

        Args:
            node: Root of the tree.

        Returns:
            CompiledFilter with the (possibly partial) clause and all errors.
        """
        errors: list[UnknownColumnError] = []
        clause = self._compile_node(node, errors)
        return CompiledFilter(clause=clause, errors=errors)

    # -------------------------
    # Node Compilation
    # -------------------------

    def _compile_node(
        self, node: FilterGroup | FilterLeaf, errors: list[UnknownColumnError]
    ) -> ColumnElement | None:
        if isinstance(node, FilterGroup):
            return self._compile_group(node, errors)
        return self._compile_leaf(node, errors)

    def _compile_group(
        self, group: FilterGroup, errors: list[UnknownColumnError]
    ) -> ColumnElement | None:
        clauses: list[ColumnElement] = []

        for child in group.children:
            clause = self._compile_node(child, errors)
            if clause is None:
                continue
            if isinstance(child, FilterGroup):
                # Force explicit parentheses regardless of operator precedence
                clause = clause.self_group()
            clauses.append(clause)

        if not clauses:
            return None
        if len(clauses) == 1:
            return clauses[0]
        if group.logic == FilterLogic.OR:
            return or_(*clauses)
        return and_(*clauses)

    def _compile_leaf(
        self, leaf: FilterLeaf, errors: list[UnknownColumnError]
    ) -> ColumnElement | None:
        if not self._descriptor.has_column(leaf.column):
            errors.append(UnknownColumnError(leaf.column, self._descriptor.name))
            return None

        col = column(leaf.column)
        match leaf.operator:
            case FilterOperator.EQ:
                return col == leaf.value
            case FilterOperator.GT:
                return col > leaf.value
            case FilterOperator.LT:
                return col < leaf.value
            case FilterOperator.LIKE:
                return col.like(f"%{leaf.value}%")
