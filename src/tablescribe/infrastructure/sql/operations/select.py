"""
SQL SELECT statement builders.

Column aliases keep result rows unambiguous when tables are joined: columns
of the primary table use their bare alias while joined columns are prefixed
with the joined table's alias.
"""

from typing import List, Mapping, Optional, Sequence

from ..dialects.mysql import MySQLDialect

COUNT_ALIAS = "row_count"


class SelectBuilder:
    """
    High-level builder for SELECT statements and LEFT OUTER JOIN clauses.

    Example:
        >>> builder = SelectBuilder(MySQLDialect())
        >>> cols = builder.columns("users", {"id": "id", "user_name": "userName"})
        >>> builder.select("users", cols)
        'SELECT `users`.`id` AS `id`, `users`.`user_name` AS `userName` FROM `users`'
    """

    def __init__(self, dialect: MySQLDialect):
        self.dialect = dialect

    def columns(
        self, table: str, aliases: Mapping[str, str], source: Optional[str] = None
    ) -> List[str]:
        """
        Build aliased column expressions.

        Args:
            table: Table the columns belong to
            aliases: Column name -> alias, in select order
            source: Reference used in place of the table name (self-join alias)
        """
        ref = source or table
        return [
            f"{self.dialect.qualify(column, ref)} AS {self.dialect.quote(alias)}"
            for column, alias in aliases.items()
        ]

    def select(
        self, table: str, columns: Sequence[str], joins: Sequence[str] = ()
    ) -> str:
        """Build ``SELECT <columns> FROM <table> <joins>``."""
        sql = f"SELECT {', '.join(columns)} FROM {self.dialect.quote(table)}"
        if joins:
            sql += " " + " ".join(joins)
        return sql

    def count(self, table: str, column: str = "*") -> str:
        """Build ``SELECT COUNT(<column>) AS row_count FROM <table>``."""
        target = "*" if column == "*" else self.dialect.qualify(column, table)
        return (
            f"SELECT COUNT({target}) AS {self.dialect.quote(COUNT_ALIAS)} "
            f"FROM {self.dialect.quote(table)}"
        )

    def distinct(self, table: str, column: str, alias: str) -> str:
        """Build ``SELECT DISTINCT <column> AS <alias> FROM <table>``."""
        return (
            f"SELECT DISTINCT {self.dialect.qualify(column, table)} "
            f"AS {self.dialect.quote(alias)} FROM {self.dialect.quote(table)}"
        )

    def left_join(
        self,
        target: str,
        conditions: Sequence[str],
        extra: Sequence[str] = (),
        alias: Optional[str] = None,
    ) -> str:
        """
        Build a LEFT OUTER JOIN clause.

        Args:
            target: Joined table name
            conditions: Relationship equality conditions, ORed together
            extra: Additional predicates ANDed after the relationship conditions
            alias: Alias for the joined table (self-joins)

        Raises:
            ValueError: If no relationship condition is given
        """
        if not conditions:
            raise ValueError(f"Join with {target} has no join condition")

        clause = f"LEFT OUTER JOIN {self.dialect.quote(target)}"
        if alias:
            clause += f" {alias}"
        on = " OR ".join(conditions)
        if len(conditions) > 1:
            on = f"({on})"
        if extra:
            on = " AND ".join([on, *extra])
        return f"{clause} ON {on}"
