"""
Pending schema changes.

A SchemaChangeSet only describes desired DDL changes for one table. It is
filled by the Table's schema methods and drained by whatever emits the DDL;
statement execution never touches it.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

INDEX_REGULAR = "INDEX"
INDEX_UNIQUE = "UNIQUE"
INDEX_FULLTEXT = "FULLTEXT"

INDEX_TYPES = (INDEX_REGULAR, INDEX_UNIQUE, INDEX_FULLTEXT)

DEFAULT_DESCRIPTION = "ENGINE=InnoDB"


@dataclass
class NewReference:
    """A foreign key to create."""

    table: str
    column: str
    on_delete: str = "RESTRICT"
    on_update: str = "RESTRICT"


@dataclass
class SchemaChangeSet:
    """Accumulated schema changes awaiting DDL emission."""

    new_description: Optional[str] = None
    new_primary_key: Optional[str] = None
    drop_primary_key: bool = False
    new_columns: Dict[str, str] = field(default_factory=dict)
    alter_columns: Dict[str, str] = field(default_factory=dict)
    drop_columns: List[str] = field(default_factory=list)
    new_references: Dict[str, NewReference] = field(default_factory=dict)
    drop_references: List[str] = field(default_factory=list)
    new_indexes: Dict[str, str] = field(default_factory=dict)
    drop_indexes: List[str] = field(default_factory=list)

    def take(self, name: str, reset: bool = False) -> Any:
        """
        Return the current value of one accumulator.

        Args:
            name: Field name, e.g. ``"new_columns"``
            reset: Restore the field to its empty value after reading

        Returns:
            A copy of the accumulator
        """
        value = copy.copy(getattr(self, name))
        if reset:
            empty = SchemaChangeSet()
            setattr(self, name, getattr(empty, name))
        return value
