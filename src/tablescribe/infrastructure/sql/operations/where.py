"""
WHERE clause builders for criteria lists.

A criteria list is a sequence of mappings. Fields inside one mapping are
ANDed and the mappings themselves are ORed:

    [{"a": 1, "b": 2}, {"a": 3}]  ->  (`a` = ? AND `b` = ?) OR (`a` = ?)
"""

from typing import Any, List, Mapping, Optional, Sequence, Tuple

from ..dialects.mysql import MySQLDialect


def build_condition(
    dialect: MySQLDialect, column: str, value: Any, table: Optional[str] = None
) -> Tuple[str, List[Any]]:
    """
    Build one equality condition.

    Lists and tuples become ``IN (...)``, ``None`` becomes ``IS NULL``.

    Examples:
        >>> build_condition(MySQLDialect(), "id", [1, 2], "users")
        ('`users`.`id` IN (?, ?)', [1, 2])
    """
    ref = dialect.qualify(column, table)
    if isinstance(value, (list, tuple, set, frozenset)):
        values = list(value)
        if not values:
            # An empty membership test can never match
            return "1 = 0", []
        markers = ", ".join("?" for _ in values)
        return f"{ref} IN ({markers})", values
    if value is None:
        return f"{ref} IS NULL", []
    return f"{ref} = ?", [value]


def build_criteria_where(
    dialect: MySQLDialect,
    criteria: Sequence[Mapping[str, Any]],
    table: Optional[str] = None,
    skip_null: bool = False,
) -> Tuple[str, List[Any]]:
    """
    Build a disjunctive WHERE body (without the WHERE keyword).

    Args:
        dialect: SQL dialect for quoting
        criteria: Sequence of column -> value mappings
        table: Optional table qualifier for column references
        skip_null: Drop fields whose value is None instead of testing IS NULL

    Returns:
        Tuple of (condition SQL, positional values). The SQL is empty when
        no mapping contributes a condition.
    """
    groups: List[str] = []
    values: List[Any] = []
    for row in criteria:
        parts: List[str] = []
        for column, value in row.items():
            if skip_null and value is None:
                continue
            condition, condition_values = build_condition(dialect, column, value, table)
            parts.append(condition)
            values.extend(condition_values)
        if parts:
            groups.append("(" + " AND ".join(parts) + ")")
    return " OR ".join(groups), values
