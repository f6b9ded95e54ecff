"""Safety module for tablesync - write payload validation."""

from .validator import RequiredFieldValidator

__all__ = [
    "RequiredFieldValidator",
]
