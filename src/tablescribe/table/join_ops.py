"""
Join operations mixin.

Joins are resolved against the relationship map computed at reflection time.
Each requested target contributes one LEFT OUTER JOIN whose ON clause ORs the
equalities of every kept relationship; extra ``where`` equalities on the
target are ANDed after them.
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from tablescribe.errors import JoinError
from tablescribe.infrastructure.schema import filter_relationships
from tablescribe.models.row import Row
from tablescribe.utils.logging import get_logger
from tablescribe.utils.naming import camel_to_snake, snake_to_camel

from .state import JoinClause

logger = get_logger(__name__)

SELF_JOIN_ALIAS = "t"


def _camel(name: str) -> str:
    return snake_to_camel(camel_to_snake(name))


class JoinOpsMixin:
    """Mixin providing joins and the in-memory search over joined rows."""

    def join(self, table: Any, **options: Any) -> Any:
        """
        Join another table on the relationships shared with it.

        Args:
            table: Table instance or table name, with or without the table
                prefix
            **options:
                pull: Use relationships where this table holds the foreign key
                push: Use relationships where the target holds the foreign key
                where: Mapping of extra target column -> value equalities

        Returns:
            The Table, for chaining

        Raises:
            JoinError: If no relationship condition links the two tables

        Example:
            >>> users.join("roles").select(shape=ReturnShape.RAW)
            [{'id': 1, 'roleId': 2, 'appRoles_id': 2, 'appRoles_name': 'admin'}]
        """
        if not self._check_ready():
            # The select that follows degrades to an empty result
            return self
        target = table if not isinstance(table, str) else self._spawn(table)

        relationships = filter_relationships(
            self.relationships.get(target.name, []),
            pull=options.get("pull"),
            push=options.get("push"),
        )
        self_join = target.name == self.name
        ref = SELF_JOIN_ALIAS if self_join else target.name

        conditions = [
            f"{self._dialect.qualify(rel.column, self.name)} = "
            f"{self._dialect.qualify(rel.related_column, ref)}"
            for rel in relationships
        ]
        if not conditions:
            self.reset()
            raise JoinError(
                f"Joined table {target.name} has nothing in common with this table",
                table=self.name,
            )

        extra: List[str] = []
        params: List[Any] = []
        for column, value in (options.get("where") or {}).items():
            extra.append(f"{self._dialect.qualify(camel_to_snake(column), ref)} = ?")
            params.append(value)

        sql = self._select_builder.left_join(
            target.name,
            conditions,
            extra,
            alias=SELF_JOIN_ALIAS if self_join else None,
        )
        self._state.joins.append(
            JoinClause(
                target=target,
                sql=sql,
                params=params,
                prefix=snake_to_camel(target.name),
                columns=list(target._column_aliases().values()),
            )
        )
        logger.debug(
            "table.join.resolved",
            table=self.name,
            target=target.name,
            condition_count=len(conditions),
        )
        return self

    def seek_join(
        self,
        table_name: str,
        columns: Mapping[str, Any],
        model: Optional[Any] = None,
        order_by: Optional[Union[str, Sequence[str]]] = None,
        start: int = 0,
        count: Optional[int] = None,
    ) -> List[Any]:
        """
        Search the joined rows of the last select without querying again.

        Args:
            table_name: Joined table name, with or without the table prefix
            columns: Column -> value (or list of accepted values); all must match
            model: Entity prototype to populate; a plain Row by default
            order_by: Attribute name, or names, to sort the matches by
            start: Index of the first match to return
            count: Number of matches to return; all remaining by default

        Returns:
            List of populated entities, empty when nothing matches
        """
        name = self._qualified_name(table_name)
        wanted = {_camel(column): value for column, value in columns.items()}
        segments = self._join_buffer.seek(name, wanted)

        prototype = model if model is not None else Row()
        target = self._join_buffer.table(name)
        found = [self._build_entity(segment, prototype, target) for segment in segments]

        if order_by:
            keys = [order_by] if isinstance(order_by, str) else list(order_by)
            found.sort(key=lambda entity: [_order_value(entity, key) for key in keys])

        end = None if count is None else start + count
        return found[start:end]

    def _spawn(self, name: str) -> Any:
        return type(self)(name, self.connection)


def _order_value(entity: Any, key: str) -> str:
    getter = getattr(entity, f"get_{key[:1].upper()}{key[1:]}", None)
    value = getter() if callable(getter) else getattr(entity, key, None)
    return "" if value is None else str(value)
