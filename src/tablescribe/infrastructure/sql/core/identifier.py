"""
SQL identifier handling utilities.

Provides functions for proper quoting and qualification of SQL identifiers
(table names, column names) to prevent SQL injection through names.
"""

from typing import Optional

# MySQL limit for table and column names
MAX_IDENTIFIER_LENGTH = 64


def quote_identifier(name: str) -> str:
    """
    Quote a SQL identifier (table or column name) with backticks.

    Args:
        name: The identifier to quote

    Returns:
        Properly quoted identifier

    Raises:
        ValueError: If name is empty or too long

    Examples:
        >>> quote_identifier("user_id")
        '`user_id`'
        >>> quote_identifier("column`name")
        '`column``name`'
    """
    if not name or not isinstance(name, str):
        raise ValueError("Identifier name must be non-empty string")
    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise ValueError(
            f"Identifier too long (max {MAX_IDENTIFIER_LENGTH} characters): {name}"
        )

    escaped = name.replace("`", "``")
    return f"`{escaped}`"


def qualify_column(column: str, table: Optional[str] = None) -> str:
    """
    Create a column reference with an optional table qualifier.

    Examples:
        >>> qualify_column("name", "users")
        '`users`.`name`'
        >>> qualify_column("name")
        '`name`'
    """
    quoted_column = quote_identifier(column)
    if table:
        return f"{quote_identifier(table)}.{quoted_column}"
    return quoted_column
