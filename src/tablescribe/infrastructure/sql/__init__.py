"""
SQL module for centralized SQL generation.

This module provides reusable utilities for building SQL statements with
proper identifier quoting and MySQL syntax.
"""

from .core.identifier import qualify_column, quote_identifier
from .core.parameters import bind_name, build_row_placeholders, positional_to_named
from .dialects.mysql import ORDER_ASC, ORDER_DESC, MySQLDialect
from .operations import (
    DeleteBuilder,
    InsertBuilder,
    SelectBuilder,
    Statement,
    UpdateBuilder,
    build_criteria_where,
)

__all__ = [
    "quote_identifier",
    "qualify_column",
    "bind_name",
    "build_row_placeholders",
    "positional_to_named",
    "MySQLDialect",
    "ORDER_ASC",
    "ORDER_DESC",
    "DeleteBuilder",
    "InsertBuilder",
    "SelectBuilder",
    "Statement",
    "UpdateBuilder",
    "build_criteria_where",
]
