"""
Table package.

This package provides the Table class: a per-table query builder that
reflects its schema, composes select/insert/update/delete/upsert statements,
resolves joins from foreign keys and maps result rows back to entities.
"""

from .core import Table
from .state import JoinBuffer, OperationKind, PendingOperation, ReturnShape

__all__ = [
    "JoinBuffer",
    "OperationKind",
    "PendingOperation",
    "ReturnShape",
    "Table",
]
