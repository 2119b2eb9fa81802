"""
Result mapping mixin.

Select results arrive as flat rows. The primary table's columns carry their
bare camelCased alias; joined columns carry ``<camelTable>_<camelColumn>``.
Rows are split into the primary segment and joined segments, deduplicated by
primary key and converted to the requested shape.
"""

import copy
import json
from typing import Any, Dict, List, Optional, Union

from tablescribe.utils.logging import get_logger
from tablescribe.utils.naming import snake_to_camel

from .state import JoinBuffer, JoinClause, ReturnShape

logger = get_logger(__name__)

MappedResult = Union[List[Any], str]


class ResultMappingMixin:
    """Mixin turning flat result rows into raw maps, JSON, or entities."""

    def _column_aliases(self) -> Dict[str, str]:
        return {column: snake_to_camel(column) for column in self._schema.columns}

    def _map_select(
        self, rows: List[Dict[str, Any]], shape: ReturnShape, joins: List[JoinClause]
    ) -> MappedResult:
        buffer = JoinBuffer()
        for join in joins:
            buffer.register(join)

        aliases = list(self._column_aliases().values())
        pk_alias = snake_to_camel(self._schema.primary_key) if self._schema.primary_key else None

        keyed: Dict[Any, Dict[str, Any]] = {}
        ordered: List[Dict[str, Any]] = []
        for row in rows:
            attributes = {alias: row.get(alias) for alias in aliases}
            for join in joins:
                segment = {
                    f"{join.prefix}_{column}": row.get(f"{join.prefix}_{column}")
                    for column in join.columns
                }
                if any(value is not None for value in segment.values()):
                    buffer.add(join.target.name, segment)

            key = attributes.get(pk_alias) if pk_alias else None
            if key is None or key == "":
                ordered.append(attributes)
            elif key in keyed:
                keyed[key].update(attributes)
            else:
                keyed[key] = attributes
                ordered.append(attributes)

        self._join_buffer = buffer
        logger.debug(
            "table.select.mapped",
            table=self.name,
            row_count=len(rows),
            unique_count=len(ordered),
        )
        return self._shape_rows(ordered, shape)

    def _shape_rows(
        self, rows: List[Dict[str, Any]], shape: ReturnShape, model: Optional[Any] = None
    ) -> MappedResult:
        if shape is ReturnShape.RAW:
            return rows
        if shape is ReturnShape.JSON:
            return json.dumps(rows, default=str)
        return [self._build_entity(values, model) for values in rows]

    def _build_entity(
        self, values: Dict[str, Any], model: Optional[Any] = None, table: Optional[Any] = None
    ) -> Any:
        entity = copy.copy(model if model is not None else self.model)
        entity.populate(values)
        entity.post_fetch()
        entity.set_table(table if table is not None else self)
        return entity
