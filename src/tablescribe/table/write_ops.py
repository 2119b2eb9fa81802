"""
Write operations mixin.

Insert, update, delete and upsert. Rows may be mappings or entities; entity
rows are read through ``to_dict()`` after their ``pre_save()`` hook. Keys are
snake_cased so that camelCased entity attributes round-trip to their columns.
"""

import uuid
from typing import Any, Dict, List, Mapping, Sequence, Set, Union

from tablescribe.errors import ShapeError
from tablescribe.models.row import Entity
from tablescribe.utils.logging import get_logger
from tablescribe.utils.naming import camel_to_snake, snake_to_camel

from .state import OperationKind, ReturnShape

logger = get_logger(__name__)

WhereColumns = Union[str, Sequence[str]]


def _has_value(value: Any) -> bool:
    return value is not None and not (isinstance(value, str) and value == "")


class WriteOpsMixin:
    """Mixin providing insert, update, delete and upsert."""

    def insert(self, rows: Sequence[Any]) -> Any:
        """
        Insert one or more rows with a single multi-row INSERT.

        Every row must carry the same columns. ``None`` and empty-string
        values fall back to the column default.

        Args:
            rows: Mappings or entities

        Returns:
            Affected row count, False when the table does not exist, or the
            Table itself under deferred execution

        Raises:
            ShapeError: If rows differ in their columns, a row is empty, or
                a row is neither a mapping nor an entity
        """
        if not self._check_ready():
            return self._degrade(OperationKind.INSERT, False)

        batch = self._prepare_batch(rows)
        try:
            statement = self._insert_builder.insert(self.name, batch)
        except ValueError as exc:
            self.reset()
            raise ShapeError(str(exc), table=self.name) from exc

        pending = self._state
        pending.kind = OperationKind.INSERT
        pending.base = statement.sql
        pending.params = statement.params
        logger.debug("table.insert.composed", table=self.name, row_count=len(batch))
        return self._dispatch()

    def update(self, rows: Sequence[Any], where_columns: WhereColumns = "id") -> Any:
        """
        Update rows matched on the where columns.

        One UPDATE template is executed once per row. Columns that carry a
        value in any row are assigned; a row lacking one of them assigns
        NULL. The primary key is only bound when it is a where column.

        Raises:
            ShapeError: For the same row-shape problems as ``insert``, or when
                no column is left to assign
        """
        if not self._check_ready():
            return self._degrade(OperationKind.UPDATE, False)

        where = self._where_columns(where_columns)
        batch = self._prepare_batch(rows)
        try:
            statement = self._update_builder.update(
                self.name, batch, where, primary_key=self.primary_key
            )
        except ValueError as exc:
            self.reset()
            raise ShapeError(str(exc), table=self.name) from exc

        pending = self._state
        pending.kind = OperationKind.UPDATE
        pending.base = statement.sql
        pending.params = statement.params
        pending.multiple = True
        logger.debug("table.update.composed", table=self.name, row_count=len(batch))
        return self._dispatch()

    def delete(self, criteria: Sequence[Any] = ()) -> Any:
        """
        Delete rows matching any of the criteria.

        ``None`` fields are ignored. Only a call without criteria deletes
        every row.

        Raises:
            ShapeError: If criteria are given but none of them carries a value
        """
        if not self._check_ready():
            return self._degrade(OperationKind.DELETE, False)

        rows = [self._criteria_row(entry) for entry in criteria]
        where, values = self._delete_builder.where(rows)
        if rows and not where:
            self.reset()
            raise ShapeError(
                "Delete criteria carry no value; refusing to delete every row",
                table=self.name,
            )

        pending = self._state
        pending.kind = OperationKind.DELETE
        pending.base = self._delete_builder.delete(self.name).sql
        pending.where, pending.where_params = where, values
        return self._dispatch()

    def upsert(self, rows: Sequence[Any], where_columns: WhereColumns = "id") -> Any:
        """
        Update rows that already exist and insert the others.

        A row is an update when every where value is found among the existing
        values of that column, compared as strings. Inserted rows without a
        primary key value get a generated hex GUID. The lookup and both writes
        always run immediately.

        Returns:
            The result of the last write performed, or None when there was
            nothing to write
        """
        if not self._check_ready():
            return self._degrade(OperationKind.UPDATE, False)

        where = self._where_columns(where_columns)
        batch = [self._normalize_row(row, pre_save=True) for row in rows]
        existing = self._existing_values(batch, where)

        updates: List[Dict[str, Any]] = []
        inserts: List[Dict[str, Any]] = []
        for row in batch:
            if all(
                _has_value(row.get(column)) and str(row[column]) in existing[column]
                for column in where
            ):
                updates.append(row)
                continue
            pk = self.primary_key
            if pk and not _has_value(row.get(pk)):
                row[pk] = uuid.uuid4().hex
            inserts.append(row)

        logger.info(
            "table.upsert.classified",
            table=self.name,
            update_count=len(updates),
            insert_count=len(inserts),
        )

        result: Any = None
        self.reset()
        if updates:
            result = self.update(updates, where)
        if inserts and (not updates or result is not False):
            result = self.insert(inserts)
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_model(self, row: Any, pre_save: bool = False) -> Dict[str, Any]:
        if isinstance(row, Mapping):
            return dict(row)
        if isinstance(row, Entity):
            if pre_save:
                row.pre_save()
            return dict(row.to_dict())
        self.reset()
        raise ShapeError(
            f"Each row must be a mapping or an entity, got {type(row).__name__}",
            table=self.name,
        )

    def _normalize_row(self, row: Any, pre_save: bool = False) -> Dict[str, Any]:
        return {
            camel_to_snake(key): value
            for key, value in self._check_model(row, pre_save=pre_save).items()
        }

    def _prepare_batch(self, rows: Sequence[Any]) -> List[Dict[str, Any]]:
        """Validate the batch shape and keep only the valued fields of each row."""
        batch: List[Dict[str, Any]] = []
        expected: Set[str] = set()
        for index, row in enumerate(rows):
            values = self._normalize_row(row, pre_save=True)
            if not values:
                self.reset()
                raise ShapeError("Cannot write an empty row", table=self.name)
            if index == 0:
                expected = set(values)
            elif set(values) != expected:
                self.reset()
                raise ShapeError(
                    "All rows must have the same columns; set the others to None",
                    table=self.name,
                )
            batch.append({k: v for k, v in values.items() if _has_value(v)})
        if not batch:
            self.reset()
            raise ShapeError("No rows given", table=self.name)
        return batch

    @staticmethod
    def _where_columns(where_columns: WhereColumns) -> List[str]:
        if isinstance(where_columns, str):
            where_columns = [where_columns]
        return [camel_to_snake(column) for column in where_columns]

    def _existing_values(
        self, batch: List[Dict[str, Any]], where: List[str]
    ) -> Dict[str, Set[str]]:
        """Collect, per where column, the stored values matching the batch."""
        existing: Dict[str, Set[str]] = {column: set() for column in where}
        criteria = [
            {column: row[column] for column in where}
            for row in batch
            if all(_has_value(row.get(column)) for column in where)
        ]
        if not criteria:
            return existing

        self.reset()
        found = self.select(criteria, shape=ReturnShape.RAW)
        if not isinstance(found, list):
            # Deferred execution returned the Table; run it now
            found = self.execute()
        for stored in found:
            for column in where:
                value = stored.get(snake_to_camel(column))
                if value is not None:
                    existing[column].add(str(value))
        return existing
