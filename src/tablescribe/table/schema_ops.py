"""
Schema change operations mixin.

These methods only describe desired DDL changes; nothing here runs a
statement. Each ``get_*`` accessor can drain its accumulator with
``reset=True`` once the caller has emitted the corresponding DDL.
"""

from typing import Any, Dict, List, Optional

from tablescribe.infrastructure.schema import (
    DEFAULT_DESCRIPTION,
    INDEX_REGULAR,
    INDEX_TYPES,
    NewReference,
)


class SchemaOpsMixin:
    """Mixin providing the schema-change description API."""

    # Description

    def set_description(self, description: str = DEFAULT_DESCRIPTION) -> Any:
        """Set the table description unless one is already set."""
        if not self._description:
            self._description = description
        return self

    def change_description(self, description: str = DEFAULT_DESCRIPTION) -> Any:
        self._changes.new_description = description
        return self

    def get_description(self) -> Optional[str]:
        return self._description

    def get_new_description(self, reset: bool = False) -> Optional[str]:
        return self._changes.take("new_description", reset)

    # Primary key

    def set_primary_key(self, column: str) -> Any:
        """Replace the primary key; an existing one is scheduled for dropping."""
        if self.primary_key == column:
            return self
        if self.primary_key:
            self.drop_primary_key()
        self._changes.new_primary_key = column
        return self

    def drop_primary_key(self) -> Any:
        self._changes.drop_primary_key = True
        return self

    def should_drop_primary_key(self, reset: bool = False) -> bool:
        return self._changes.take("drop_primary_key", reset)

    def get_new_primary_key(self, reset: bool = False) -> Optional[str]:
        return self._changes.take("new_primary_key", reset)

    # Indexes

    def add_index(self, column: str, type: str = INDEX_REGULAR) -> Any:
        """
        Schedule an index on a column that has none yet.

        Raises:
            ValueError: If type is not one of INDEX, UNIQUE or FULLTEXT
        """
        if type not in INDEX_TYPES:
            raise ValueError(f"Invalid index type: {type}")
        if column not in self._schema.indexes and column not in self._changes.new_indexes:
            self._changes.new_indexes[column] = type
        return self

    def get_new_indexes(self, reset: bool = False) -> Dict[str, str]:
        return self._changes.take("new_indexes", reset)

    def drop_index(self, column: str) -> Any:
        """Schedule an index for dropping, along with the column's reference."""
        if column not in self._changes.drop_indexes:
            self._changes.drop_indexes.append(column)
        if column in self._schema.references:
            self.drop_reference(column)
        return self

    def get_drop_indexes(self, reset: bool = False) -> List[str]:
        return self._changes.take("drop_indexes", reset)

    # Columns

    def add_column(self, column: str, description: str) -> Any:
        self._changes.new_columns[column] = description
        return self

    def get_new_columns(self, reset: bool = False) -> Dict[str, str]:
        return self._changes.take("new_columns", reset)

    def alter_column(self, column: str, description: str) -> Any:
        self._changes.alter_columns[column] = description
        return self

    def get_alter_columns(self, reset: bool = False) -> Dict[str, str]:
        return self._changes.take("alter_columns", reset)

    def drop_column(self, column: str) -> Any:
        """Schedule a column for dropping, along with its reference."""
        self._changes.drop_columns.append(column)
        if column in self._schema.references:
            self.drop_reference(column)
        return self

    def get_drop_columns(self, reset: bool = False) -> List[str]:
        return self._changes.take("drop_columns", reset)

    # References

    def add_reference(
        self,
        column: str,
        ref_table: str,
        ref_column: str,
        on_delete: str = "RESTRICT",
        on_update: str = "RESTRICT",
    ) -> Any:
        """Schedule a foreign key; the column is indexed as well."""
        self.add_index(column)
        self._changes.new_references[column] = NewReference(
            table=ref_table,
            column=ref_column,
            on_delete=on_delete,
            on_update=on_update,
        )
        return self

    def alter_reference(
        self,
        column: str,
        ref_table: str,
        ref_column: str,
        on_delete: str = "RESTRICT",
        on_update: str = "RESTRICT",
    ) -> Any:
        self.drop_reference(column)
        return self.add_reference(column, ref_table, ref_column, on_delete, on_update)

    def get_new_references(self, reset: bool = False) -> Dict[str, NewReference]:
        return self._changes.take("new_references", reset)

    def drop_reference(self, column: str) -> Any:
        self._changes.drop_references.append(column)
        return self

    def get_drop_references(self, reset: bool = False) -> List[str]:
        """Columns whose references are to be dropped, without duplicates."""
        return list(dict.fromkeys(self._changes.take("drop_references", reset)))
