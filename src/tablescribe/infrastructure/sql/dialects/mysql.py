"""
MySQL-specific SQL dialect implementation.

Provides backtick identifier quoting and the clause shapes used by the table
builder: multi-row INSERT, UPDATE by where columns, ORDER BY, and the
``LIMIT start, count`` form.
"""

from typing import List, Optional, Sequence, Tuple

from ..core.identifier import qualify_column, quote_identifier
from ..core.parameters import bind_name

ORDER_ASC = "ASC"
ORDER_DESC = "DESC"


class MySQLDialect:
    """MySQL SQL dialect implementation."""

    name = "mysql"

    def quote(self, identifier: str) -> str:
        """Quote an identifier using MySQL syntax (backticks)."""
        return quote_identifier(identifier)

    def qualify(self, column: str, table: Optional[str] = None) -> str:
        """Create a table-qualified column reference."""
        return qualify_column(column, table)

    def build_insert(
        self,
        table: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
    ) -> str:
        """
        Build a multi-row INSERT statement.

        Args:
            table: Table name
            columns: List of column names
            rows: One list of placeholders per VALUES tuple

        Returns:
            INSERT SQL statement
        """
        quoted_cols = ", ".join(self.quote(c) for c in columns)
        tuples = ", ".join(f"({', '.join(placeholders)})" for placeholders in rows)
        return f"INSERT INTO {self.quote(table)} ({quoted_cols}) VALUES {tuples}"

    def build_update(
        self,
        table: str,
        set_columns: Sequence[str],
        where_columns: Sequence[str],
    ) -> str:
        """
        Build an UPDATE statement with named placeholders.

        Args:
            table: Table name
            set_columns: Columns to assign
            where_columns: Columns matched for equality, ANDed

        Returns:
            UPDATE SQL statement
        """
        assignments = ", ".join(
            f"{self.quote(c)} = :{bind_name(c)}" for c in set_columns
        )
        conditions = " AND ".join(
            f"{self.quote(c)} = :{bind_name(c)}" for c in where_columns
        )
        return f"UPDATE {self.quote(table)} SET {assignments} WHERE {conditions}"

    def build_delete(self, table: str) -> str:
        """Build the base DELETE statement."""
        return f"DELETE FROM {self.quote(table)}"

    def build_group_by(self, table: str, columns: Sequence[str]) -> str:
        """Build a GROUP BY clause over table-qualified columns."""
        return "GROUP BY " + ", ".join(self.qualify(c, table) for c in columns)

    def build_order_by(self, table: str, orders: Sequence[Tuple[str, str]]) -> str:
        """
        Build an ORDER BY clause.

        Raises:
            ValueError: If a direction is neither ASC nor DESC
        """
        parts: List[str] = []
        for column, direction in orders:
            direction = direction.upper()
            if direction not in (ORDER_ASC, ORDER_DESC):
                raise ValueError(f"Invalid order direction: {direction}")
            parts.append(f"{self.qualify(column, table)} {direction}")
        return "ORDER BY " + ", ".join(parts)

    def build_limit(self, count: int, start: int = 0, with_offset: bool = True) -> str:
        """
        Build a LIMIT clause.

        UPDATE and DELETE only accept a row count, so ``with_offset=False``
        drops the start position.
        """
        if with_offset:
            return f"LIMIT {int(start)}, {int(count)}"
        return f"LIMIT {int(count)}"
