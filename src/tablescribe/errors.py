"""
Table builder exceptions.
"""

from typing import Optional


class TableError(Exception):
    """Base exception for table builder errors."""

    def __init__(self, message: str, table: Optional[str] = None):
        self.table = table
        super().__init__(message)

    def __str__(self) -> str:
        if self.table:
            return f"{self.args[0]} (table: {self.table})"
        return str(self.args[0])


class ConfigurationError(TableError):
    """Raised when a table is used without a bound connection."""

    pass


class ShapeError(TableError):
    """Raised when insert/update rows are empty, mixed, or of an unsupported type."""

    pass


class JoinError(TableError):
    """Raised when a join yields no relationship condition."""

    pass


class ExecutionError(TableError):
    """Raised when the execution collaborator fails to run a statement."""

    pass
