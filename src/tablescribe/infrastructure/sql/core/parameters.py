"""
SQL parameter binding utilities.

Insert and update statements bind values by name while select and delete
statements bind them positionally with ``?``. SQLAlchemy's ``text()`` only
understands named binds, so positional markers are rewritten into numbered
named parameters right before execution.
"""

import re
from typing import Any, Dict, List, Sequence, Tuple

# Quoted literals and identifiers are skipped; anything else that is a bare
# ``?`` is a positional marker.
_POSITIONAL_TOKEN = re.compile(
    r"""
    '(?:[^'\\]|\\.|'')*'      # single-quoted literal
    | "(?:[^"\\]|\\.|"")*"    # double-quoted literal
    | `(?:[^`]|``)*`          # backtick identifier
    | (\?)                    # positional marker
    """,
    re.VERBOSE,
)

_UNSAFE_PARAM_CHARS = re.compile(r"\W")


def bind_name(column: str) -> str:
    """
    Build a bind-parameter name for a column.

    Examples:
        >>> bind_name("first-name")
        'first_name'
    """
    return _UNSAFE_PARAM_CHARS.sub("_", column)


def row_param_name(column: str, row_index: int) -> str:
    """
    Build the bind-parameter name for one column of one row.

    Non-word characters are replaced so that the name stays a valid bind
    parameter even for unusual column names.

    Examples:
        >>> row_param_name("name", 0)
        'name_0'
        >>> row_param_name("first-name", 2)
        'first_name_2'
    """
    return f"{bind_name(column)}_{row_index}"


def build_row_placeholders(
    columns: Sequence[str], row_index: int, present: Sequence[str]
) -> Tuple[List[str], Dict[str, str]]:
    """
    Build the placeholder list for one VALUES tuple.

    Columns the row carries get a named placeholder; the rest fall back to
    the column default.

    Args:
        columns: Column names in statement order
        row_index: Position of the row in the batch
        present: Columns for which the row carries a value

    Returns:
        Tuple of (placeholder strings, column to parameter-name mapping)

    Examples:
        >>> build_row_placeholders(["id", "name"], 1, ["id"])
        ([':id_1', 'DEFAULT'], {'id': 'id_1'})
    """
    placeholders: List[str] = []
    param_map: Dict[str, str] = {}
    for column in columns:
        if column in present:
            param_map[column] = row_param_name(column, row_index)
            placeholders.append(f":{param_map[column]}")
        else:
            placeholders.append("DEFAULT")
    return placeholders, param_map


def positional_to_named(
    sql: str, values: Sequence[Any], prefix: str = "p"
) -> Tuple[str, Dict[str, Any]]:
    """
    Rewrite positional ``?`` markers into numbered named binds.

    Args:
        sql: Statement text using ``?`` markers
        values: Values in marker order
        prefix: Prefix for the generated parameter names

    Returns:
        Tuple of (rewritten SQL, parameter dict)

    Raises:
        ValueError: If the number of markers and values differ

    Examples:
        >>> positional_to_named("SELECT * FROM `t` WHERE (`a` = ?) OR (`a` = ?)", [1, 2])
        ('SELECT * FROM `t` WHERE (`a` = :p_0) OR (`a` = :p_1)', {'p_0': 1, 'p_1': 2})
    """
    params: Dict[str, Any] = {}
    counter = iter(range(len(values) + 1))

    def _replace(match: "re.Match[str]") -> str:
        if match.group(1) is None:
            return match.group(0)
        index = next(counter)
        if index >= len(values):
            raise ValueError(
                f"Statement has more positional markers than values ({len(values)})"
            )
        name = f"{prefix}_{index}"
        params[name] = values[index]
        return f":{name}"

    rewritten = _POSITIONAL_TOKEN.sub(_replace, sql)
    if len(params) != len(values):
        raise ValueError(
            f"Statement has {len(params)} positional markers but {len(values)} values"
        )
    return rewritten, params
