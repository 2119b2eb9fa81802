"""
Builder state for one execute cycle.

A Table collects entry-call fragments and modifier fragments into a
PendingOperation. ``render`` assembles them in a fixed order:

    base [WHERE regular [connector custom] | WHERE custom]
         [GROUP BY] [HAVING] [ORDER BY] [LIMIT]

The JoinBuffer keeps the joined segments of the last select so that they can
be searched without another query.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Tuple

from tablescribe.infrastructure.sql.dialects import MySQLDialect

if TYPE_CHECKING:
    from .core import Table


class ReturnShape(Enum):
    """Shape of select-family results."""

    RAW = "raw"
    MODEL = "model"
    JSON = "json"


class OperationKind(Enum):
    SELECT = "select"
    COUNT = "count"
    DISTINCT = "distinct"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


# Operations whose rows go through the result mapper
SELECT_FAMILY = (OperationKind.SELECT, OperationKind.COUNT, OperationKind.DISTINCT)

# Operations that render pending joins; count ignores them
JOINED_KINDS = (OperationKind.SELECT, OperationKind.DISTINCT)

# Operations bound by name; modifiers do not apply to them
NAMED_KINDS = (OperationKind.INSERT, OperationKind.UPDATE)


@dataclass
class JoinClause:
    """One resolved LEFT OUTER JOIN and what is needed to read its columns back."""

    target: "Table"
    sql: str
    params: List[Any]
    prefix: str
    columns: List[str]


@dataclass
class PendingOperation:
    """Fragments accumulated for one statement."""

    kind: Optional[OperationKind] = None
    base: str = ""
    params: Any = field(default_factory=list)
    multiple: bool = False
    shape: ReturnShape = ReturnShape.MODEL
    delay: bool = False

    where: str = ""
    where_params: List[Any] = field(default_factory=list)

    custom_connector: str = "AND"
    custom_where: List[str] = field(default_factory=list)
    custom_params: List[Any] = field(default_factory=list)

    joins: List[JoinClause] = field(default_factory=list)
    groups: List[str] = field(default_factory=list)
    having: str = ""
    having_params: List[Any] = field(default_factory=list)
    orders: List[Tuple[str, str]] = field(default_factory=list)
    limit: Optional[Tuple[int, int]] = None

    # Alias of the single column read back by count and distinct
    result_alias: Optional[str] = None

    def add_custom(self, sql: str, connector: str, params: Sequence[Any] = ()) -> None:
        if not self.custom_where:
            self.custom_connector = connector
            self.custom_where.append(sql.strip())
        else:
            self.custom_where.append(f"{connector} {sql.strip()}")
        self.custom_params.extend(params)

    def render(self, dialect: MySQLDialect, table: str) -> Tuple[str, Any]:
        """
        Assemble the final statement text and its parameters.

        Args:
            dialect: Dialect used for the GROUP BY, ORDER BY and LIMIT clauses
            table: Name of the table the operation runs against

        Returns:
            Tuple of (sql, params). Named operations return their parameters
            untouched; positional ones return a flat list in marker order.
        """
        if self.kind in NAMED_KINDS:
            return self.base, self.params

        sql = self.base
        values: List[Any] = []

        if self.kind in JOINED_KINDS:
            for join in self.joins:
                sql += f" {join.sql}"
                values.extend(join.params)

        custom = " ".join(self.custom_where)
        if self.where:
            sql += f" WHERE {self.where}"
            values.extend(self.where_params)
            if custom:
                sql += f" {self.custom_connector} {custom}"
                values.extend(self.custom_params)
        elif custom:
            sql += f" WHERE {custom}"
            values.extend(self.custom_params)

        if self.kind in SELECT_FAMILY:
            if self.groups:
                sql += " " + dialect.build_group_by(table, self.groups)
            if self.having:
                sql += f" HAVING {self.having}"
                values.extend(self.having_params)

        if self.orders:
            sql += " " + dialect.build_order_by(table, self.orders)

        if self.limit is not None:
            count, start = self.limit
            with_offset = self.kind in SELECT_FAMILY
            sql += " " + dialect.build_limit(count, start, with_offset=with_offset)

        return sql, values


class JoinBuffer:
    """
    Joined segments retained from the most recent select, per joined table.

    Segments keep their aliased keys (``<camelTable>_<camelColumn>``); the
    prefix is stripped when they are read back through ``seek``.
    """

    def __init__(self) -> None:
        self._segments: Dict[str, List[Dict[str, Any]]] = {}
        self._prefixes: Dict[str, str] = {}
        self._tables: Dict[str, "Table"] = {}

    def __bool__(self) -> bool:
        return bool(self._prefixes)

    def register(self, join: JoinClause) -> None:
        name = join.target.name
        self._segments.setdefault(name, [])
        self._prefixes[name] = join.prefix
        self._tables[name] = join.target

    def add(self, table: str, segment: Dict[str, Any]) -> None:
        segments = self._segments.setdefault(table, [])
        if segment not in segments:
            segments.append(segment)

    def table(self, name: str) -> Optional["Table"]:
        return self._tables.get(name)

    def seek(self, table: str, columns: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """
        Find segments of a joined table matching every column.

        A column matches when it equals the given value, or when the given
        value is a list or tuple containing it.

        Args:
            table: Joined table name
            columns: camelCased column alias -> expected value

        Returns:
            Matching segments with the alias prefix removed
        """
        prefix = self._prefixes.get(table)
        if prefix is None:
            return []

        head = f"{prefix}_"
        matches: List[Dict[str, Any]] = []
        for segment in self._segments.get(table, []):
            if all(
                _matches(segment.get(head + column), expected)
                for column, expected in columns.items()
            ):
                matches.append(
                    {
                        key[len(head):] if key.startswith(head) else key: value
                        for key, value in segment.items()
                    }
                )
        return matches


def _matches(actual: Any, expected: Any) -> bool:
    if isinstance(expected, (list, tuple)):
        return actual in expected
    return actual == expected
