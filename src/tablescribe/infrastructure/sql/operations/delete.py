"""SQL DELETE statement builders."""

from typing import Any, List, Mapping, Sequence, Tuple

from ..dialects.mysql import MySQLDialect
from .statement import Statement
from .where import build_criteria_where


class DeleteBuilder:
    """
    Builder for DELETE statements over a criteria list.

    Example:
        >>> stmt = DeleteBuilder(MySQLDialect()).delete("users", [{"id": 1}, {"id": 2}])
        >>> stmt.sql
        'DELETE FROM `users` WHERE (`id` = ?) OR (`id` = ?)'
        >>> stmt.params
        [1, 2]
    """

    def __init__(self, dialect: MySQLDialect):
        self.dialect = dialect

    def where(self, criteria: Sequence[Mapping[str, Any]]) -> Tuple[str, List[Any]]:
        """
        Build the WHERE body for a delete.

        Fields whose value is None are ignored and columns are left
        unqualified.
        """
        return build_criteria_where(self.dialect, criteria, skip_null=True)

    def delete(self, table: str, criteria: Sequence[Mapping[str, Any]] = ()) -> Statement:
        """
        Build a DELETE statement.

        A criteria list that leaves no condition deletes every row.
        """
        sql = self.dialect.build_delete(table)
        where, values = self.where(criteria)
        if where:
            sql += f" WHERE {where}"
        return Statement(sql=sql, params=values)
