"""Filter AST for tablesync - nested filter parsing and compilation."""

from .compiler import CompiledFilter, FilterCompiler
from .models import FilterGroup, FilterLeaf, FilterLogic, FilterNode, FilterOperator
from .parser import FilterParser

__all__ = [
    "CompiledFilter",
    "FilterCompiler",
    "FilterGroup",
    "FilterLeaf",
    "FilterLogic",
    "FilterNode",
    "FilterOperator",
    "FilterParser",
]
