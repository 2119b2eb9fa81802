"""
SQL UPDATE statement builders.

One UPDATE template is built for the whole batch and executed once per row
with that row's named parameters.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..core.parameters import bind_name
from ..dialects.mysql import MySQLDialect
from .statement import Statement


class UpdateBuilder:
    """
    High-level builder for batch UPDATE statements.

    Example:
        >>> builder = UpdateBuilder(MySQLDialect())
        >>> stmt = builder.update("users", [{"id": 1, "name": "a"}], ["id"])
        >>> print(stmt.sql)
        UPDATE `users` SET `name` = :name WHERE `id` = :id
    """

    def __init__(self, dialect: MySQLDialect):
        self.dialect = dialect

    def update(
        self,
        table: str,
        rows: Sequence[Mapping[str, Any]],
        where_columns: Sequence[str],
        primary_key: Optional[str] = None,
    ) -> Statement:
        """
        Build an UPDATE statement and one parameter set per row.

        The SET list holds every column that carries a value in any row,
        except where columns and the primary key. The primary key is bound
        only when it is one of the where columns.

        Args:
            table: Table name
            rows: Column -> value mappings holding only the valued columns
            where_columns: Columns matched for equality
            primary_key: Primary key column of the table, if any

        Returns:
            Statement executed with ``multiple=True``

        Raises:
            ValueError: If no column is left to assign
        """
        set_columns: List[str] = []
        for row in rows:
            for column in row:
                if column == primary_key or column in where_columns:
                    continue
                if column not in set_columns:
                    set_columns.append(column)

        if not set_columns:
            raise ValueError(f"No columns to update in {table}")

        params: List[Dict[str, Any]] = []
        for row in rows:
            bound: Dict[str, Any] = {
                bind_name(column): row.get(column) for column in set_columns
            }
            for column in where_columns:
                bound[bind_name(column)] = row.get(column)
            params.append(bound)

        sql = self.dialect.build_update(table, set_columns, where_columns)
        return Statement(sql=sql, params=params, multiple=True)
