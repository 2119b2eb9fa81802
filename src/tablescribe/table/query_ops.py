"""
Query operations mixin.

Entry points (select, count, distinct) and the chainable modifiers that shape
them, plus ``execute`` which renders the pending operation, runs it through
the connection and resets the builder state.
"""

from typing import Any, Dict, List, Mapping, Sequence, Union

from tablescribe.infrastructure.sql.dialects import ORDER_ASC
from tablescribe.infrastructure.sql.operations import (
    COUNT_ALIAS,
    build_condition,
    build_criteria_where,
)
from tablescribe.utils.logging import get_logger
from tablescribe.utils.naming import camel_to_snake, snake_to_camel

from .state import OperationKind, PendingOperation, ReturnShape

logger = get_logger(__name__)

TABLE_PLACEHOLDER = ":TBL:"


class QueryOpsMixin:
    """Mixin providing select-family operations and query modifiers."""

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def select(
        self,
        criteria: Sequence[Any] = (),
        shape: ReturnShape = ReturnShape.MODEL,
    ) -> Any:
        """
        Select rows matching any of the criteria.

        Each criteria entry is a mapping or an entity; its fields are ANDed
        and the entries are ORed. List values become ``IN (...)``.

        Args:
            criteria: Sequence of column -> value mappings or entities
            shape: Result shape (entities, raw dicts, or a JSON string)

        Returns:
            The mapped rows, or the Table itself under deferred execution

        Example:
            >>> users.select([{"id": 1}, {"id": 2}], shape=ReturnShape.RAW)
            [{'id': 1, 'userName': 'alice'}, {'id': 2, 'userName': 'bob'}]
        """
        if not self._check_ready():
            return self._degrade(OperationKind.SELECT, [])

        pending = self._state
        pending.kind = OperationKind.SELECT
        pending.shape = shape
        # The column list is composed at execute time, after any later join
        self._apply_criteria(criteria)
        return self._dispatch()

    def count(self, column: str = "*", criteria: Sequence[Any] = ()) -> Any:
        """
        Count rows, optionally restricted by criteria.

        Returns:
            The count as an int; 0 when nothing matches or the table does
            not exist
        """
        if not self._check_ready():
            return self._degrade(OperationKind.COUNT, 0)

        pending = self._state
        pending.kind = OperationKind.COUNT
        pending.result_alias = COUNT_ALIAS
        target = column if column == "*" else camel_to_snake(column)
        pending.base = self._select_builder.count(self.name, target)
        self._apply_criteria(criteria)
        return self._dispatch()

    def distinct(
        self,
        column: str,
        criteria: Sequence[Any] = (),
        shape: ReturnShape = ReturnShape.RAW,
    ) -> Any:
        """Fetch the distinct values of one column."""
        if not self._check_ready():
            return self._degrade(OperationKind.DISTINCT, [])

        pending = self._state
        pending.kind = OperationKind.DISTINCT
        pending.shape = shape
        snake = camel_to_snake(column)
        pending.result_alias = snake_to_camel(snake)
        pending.base = self._select_builder.distinct(self.name, snake, pending.result_alias)
        self._apply_criteria(criteria)
        return self._dispatch()

    # ------------------------------------------------------------------
    # Modifiers
    # ------------------------------------------------------------------

    def group_by(self, column: str) -> Any:
        self._state.groups.append(camel_to_snake(column))
        return self

    def having(
        self,
        condition: str,
        placeholder: str = TABLE_PLACEHOLDER,
        params: Sequence[Any] = (),
    ) -> Any:
        """
        Restrict grouped rows.

        Args:
            condition: Ready-made condition, e.g. ``COUNT(`:TBL:`.`id`) > ?``
            placeholder: Token replaced with the table name
            params: Values for the ``?`` markers in the condition
        """
        pending = self._state
        pending.having = condition.replace(placeholder, self.name).strip()
        pending.having_params = list(params)
        return self

    def order_by(self, column: str, direction: str = ORDER_ASC) -> Any:
        """
        Order the result by a column.

        Raises:
            ValueError: If direction is not ASC or DESC
        """
        order = (camel_to_snake(column), direction.upper())
        # Validate now rather than at execute time
        self._dialect.build_order_by(self.name, [order])
        self._state.orders.append(order)
        return self

    def limit(self, count: int, start: int = 0) -> Any:
        self._state.limit = (int(count), int(start))
        return self

    def custom_where(
        self,
        sql: str,
        connector: str = "AND",
        placeholder: str = TABLE_PLACEHOLDER,
        params: Sequence[Any] = (),
    ) -> Any:
        """
        Add a ready-made condition to the WHERE clause.

        The first custom condition is linked to the regular criteria with
        ``connector``; when no criteria are given it becomes the whole WHERE
        clause. Later custom conditions are appended with their own connector.

        Args:
            sql: Condition text; ``placeholder`` is replaced with the table name
            connector: AND or OR
            placeholder: Token replaced with the table name
            params: Values for the ``?`` markers in the condition
        """
        self._state.add_custom(
            sql.replace(placeholder, self.name), connector.upper(), params
        )
        return self

    def like(self, column: str, value: Any, logical_and: bool = True) -> Any:
        """Match a column against a LIKE pattern, e.g. ``like("name", "%ann%")``."""
        condition = f"{self._dialect.qualify(camel_to_snake(column), self.name)} LIKE ?"
        self._state.add_custom(condition, "AND" if logical_and else "OR", [value])
        return self

    def in_(self, column: str, values: Sequence[Any], logical_and: bool = True) -> Any:
        """Match a column against a list of values."""
        condition, bound = build_condition(
            self._dialect, camel_to_snake(column), list(values), self.name
        )
        self._state.add_custom(condition, "AND" if logical_and else "OR", bound)
        return self

    def delay_execute(self, delay: bool = True) -> Any:
        """Make the next entry call return the Table instead of executing."""
        self._state.delay = delay
        return self

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self) -> Any:
        """
        Run the pending operation.

        The builder state is reset whether the statement succeeds or fails.

        Returns:
            Mapped rows for select and distinct, an int for count, and the
            affected row count for insert, update and delete. When the table
            does not exist: an empty list for select and distinct, 0 for
            count, False otherwise.
        """
        pending = self._state
        try:
            if not self._check_ready():
                if pending.kind in (OperationKind.SELECT, OperationKind.DISTINCT):
                    return []
                if pending.kind is OperationKind.COUNT:
                    return 0
                return False
            if pending.kind is None:
                logger.debug("table.execute.nothing_pending", table=self.name)
                return False

            if pending.kind is OperationKind.SELECT:
                pending.base = self._select_base(pending)
            sql, params = pending.render(self._dialect, self.name)
            logger.debug(
                "table.execute.started",
                table=self.name,
                operation=pending.kind.value,
                sql=sql,
            )
            result = self.connection.do_prepare(
                sql,
                params,
                multiple_rows=pending.multiple,
                model=self.model if pending.shape is ReturnShape.MODEL else None,
            )
            return self._finish(pending, result)
        finally:
            self.reset()

    def reset(self) -> Any:
        """Discard the pending operation and every modifier."""
        self._pending = PendingOperation()
        return self

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def _state(self) -> PendingOperation:
        return self._pending

    def _select_base(self, pending: PendingOperation) -> str:
        """SELECT ... FROM with this table's columns and those of every join."""
        columns = self._select_builder.columns(self.name, self._column_aliases())
        for join in pending.joins:
            source = "t" if join.target.name == self.name else None
            columns.extend(
                self._select_builder.columns(
                    join.target.name,
                    {
                        column: f"{join.prefix}_{alias}"
                        for column, alias in join.target._column_aliases().items()
                    },
                    source=source,
                )
            )
        return self._select_builder.select(self.name, columns)

    def _apply_criteria(self, criteria: Sequence[Any]) -> None:
        rows = [self._criteria_row(entry) for entry in criteria]
        where, values = build_criteria_where(self._dialect, rows, self.name)
        self._state.where = where
        self._state.where_params = values

    def _criteria_row(self, entry: Any) -> Dict[str, Any]:
        return {camel_to_snake(k): v for k, v in self._check_model(entry).items()}

    def _dispatch(self) -> Any:
        if self._state.delay:
            return self
        return self.execute()

    def _degrade(self, kind: OperationKind, value: Any) -> Any:
        logger.debug("table.not_found", table=self.name, operation=kind.value)
        if self._state.delay:
            self._state.kind = kind
            return self
        self.reset()
        return value

    def _finish(self, pending: PendingOperation, result: Any) -> Any:
        kind = pending.kind
        rows: List[Mapping[str, Any]] = result if isinstance(result, list) else []

        if kind is OperationKind.SELECT:
            mapped = self._map_select(list(rows), pending.shape, pending.joins)
            logger.info("table.select.executed", table=self.name, row_count=len(rows))
            return mapped
        if kind is OperationKind.COUNT:
            total = int(rows[0].get(pending.result_alias) or 0) if rows else 0
            logger.info("table.count.executed", table=self.name, count=total)
            return total
        if kind is OperationKind.DISTINCT:
            values: List[Dict[str, Any]] = [
                {pending.result_alias: row.get(pending.result_alias)} for row in rows
            ]
            logger.info("table.distinct.executed", table=self.name, row_count=len(values))
            return self._shape_rows(values, pending.shape)

        affected: Union[int, Any] = result
        logger.info(
            f"table.{kind.value}.executed",
            table=self.name,
            affected_rows=affected if isinstance(affected, int) else None,
        )
        return affected
