"""
Data models for reflected table metadata.

These dataclasses mirror the rows returned by the INFORMATION_SCHEMA
queries in ``reflector.py``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


# Column key kinds that mean the column carries an index
INDEXED_KEY_KINDS = ("MUL", "UNI", "PRI", "SPA", "FUL")


@dataclass
class ColumnInfo:
    """Definition of one column as reported by INFORMATION_SCHEMA.COLUMNS."""

    name: str
    default: Optional[str] = None
    nullable: bool = True
    type: str = ""
    extra: str = ""
    key: str = ""
    charset: Optional[str] = None
    collation: Optional[str] = None
    index_name: Optional[str] = None

    @property
    def is_indexed(self) -> bool:
        return self.key in INDEXED_KEY_KINDS


@dataclass
class Reference:
    """A foreign key held by this table (forward reference)."""

    constraint_name: str
    table: str
    column: str
    schema: Optional[str] = None
    on_delete: Optional[str] = None
    on_update: Optional[str] = None


@dataclass
class BackReference:
    """A foreign key in another table that points at this table."""

    table: str
    column: str
    schema: Optional[str] = None


class Direction(Enum):
    """Which side of a relationship holds the foreign key."""

    PULL = "pull"  # this table holds the foreign key
    PUSH = "push"  # the related table holds the foreign key


@dataclass(frozen=True)
class Relationship:
    """A resolved equality between a column here and a column in another table."""

    column: str
    related_table: str
    related_column: str
    direction: Direction

    @property
    def is_push(self) -> bool:
        return self.direction is Direction.PUSH


@dataclass
class TableSchema:
    """Everything reflected for one table."""

    columns: Dict[str, ColumnInfo] = field(default_factory=dict)
    primary_key: Optional[str] = None
    indexes: Dict[str, Optional[str]] = field(default_factory=dict)
    references: Dict[str, Reference] = field(default_factory=dict)
    back_references: Dict[str, List[BackReference]] = field(default_factory=dict)

    @property
    def exists(self) -> bool:
        return bool(self.columns)
