"""Statement builders for the supported SQL operations."""

from .delete import DeleteBuilder
from .insert import InsertBuilder
from .select import COUNT_ALIAS, SelectBuilder
from .statement import Statement
from .update import UpdateBuilder
from .where import build_condition, build_criteria_where

__all__ = [
    "COUNT_ALIAS",
    "DeleteBuilder",
    "InsertBuilder",
    "SelectBuilder",
    "Statement",
    "UpdateBuilder",
    "build_condition",
    "build_criteria_where",
]
