"""
SQL INSERT statement builders.

Provides a builder for multi-row INSERT statements with one VALUES tuple per
row and named placeholders.
"""

from typing import Any, Dict, List, Mapping, Sequence

from ..core.parameters import build_row_placeholders
from ..dialects.mysql import MySQLDialect
from .statement import Statement


class InsertBuilder:
    """
    High-level builder for INSERT statements.

    Example:
        >>> builder = InsertBuilder(MySQLDialect())
        >>> stmt = builder.insert("users", [{"id": "x", "name": "a"}, {"id": "y"}])
        >>> print(stmt.sql)
        INSERT INTO `users` (`id`, `name`) VALUES (:id_0, :name_0), (:id_1, DEFAULT)
    """

    def __init__(self, dialect: MySQLDialect):
        """
        Initialize the InsertBuilder.

        Args:
            dialect: SQL dialect to use for statement generation
        """
        self.dialect = dialect

    @staticmethod
    def collect_columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
        """Union of the columns carried by the rows, in first-seen order."""
        columns: List[str] = []
        for row in rows:
            for column in row:
                if column not in columns:
                    columns.append(column)
        return columns

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> Statement:
        """
        Build an INSERT statement covering every row.

        Args:
            table: Table name
            rows: Column -> value mappings holding only the valued columns of
                each row; columns missing from a row fall back to DEFAULT

        Returns:
            Statement with a single named parameter dict

        Raises:
            ValueError: If no row carries any column
        """
        columns = self.collect_columns(rows)
        if not columns:
            raise ValueError(f"No columns to insert into {table}")

        tuples: List[List[str]] = []
        params: Dict[str, Any] = {}
        for index, row in enumerate(rows):
            placeholders, param_map = build_row_placeholders(columns, index, list(row))
            tuples.append(placeholders)
            for column, name in param_map.items():
                params[name] = row[column]

        sql = self.dialect.build_insert(table, columns, tuples)
        return Statement(sql=sql, params=params)
