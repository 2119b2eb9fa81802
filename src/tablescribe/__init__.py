"""
tablescribe - per-table query building and schema reflection.

A Table reflects its columns, keys and foreign-key relationships from
INFORMATION_SCHEMA, accumulates builder calls into one statement, resolves
joins from the discovered relationships, runs the statement through a
Connection and maps the rows back to entities.

Usage:
    >>> from tablescribe import Connection, Table
    >>> users = Table("users", Connection.from_settings())
    >>> users.order_by("userName").limit(10).select()
"""

from tablescribe.errors import (
    ConfigurationError,
    ExecutionError,
    JoinError,
    ShapeError,
    TableError,
)
from tablescribe.infrastructure.schema import Direction, Relationship
from tablescribe.infrastructure.sql.dialects import ORDER_ASC, ORDER_DESC
from tablescribe.io import Connection
from tablescribe.models import Entity, Row
from tablescribe.table import ReturnShape, Table

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Connection",
    "Direction",
    "Entity",
    "ExecutionError",
    "JoinError",
    "ORDER_ASC",
    "ORDER_DESC",
    "Relationship",
    "ReturnShape",
    "Row",
    "ShapeError",
    "Table",
    "TableError",
]
