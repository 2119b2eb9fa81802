"""
Schema package: metadata reflection, relationship resolution and pending
schema-change descriptions for a single table.
"""

from .changes import (
    DEFAULT_DESCRIPTION,
    INDEX_FULLTEXT,
    INDEX_REGULAR,
    INDEX_TYPES,
    INDEX_UNIQUE,
    NewReference,
    SchemaChangeSet,
)
from .models import (
    BackReference,
    ColumnInfo,
    Direction,
    Reference,
    Relationship,
    TableSchema,
)
from .reflector import SchemaReflector
from .relationships import filter_relationships, resolve_relationships

__all__ = [
    "BackReference",
    "ColumnInfo",
    "DEFAULT_DESCRIPTION",
    "Direction",
    "INDEX_FULLTEXT",
    "INDEX_REGULAR",
    "INDEX_TYPES",
    "INDEX_UNIQUE",
    "NewReference",
    "Reference",
    "Relationship",
    "SchemaChangeSet",
    "SchemaReflector",
    "TableSchema",
    "filter_relationships",
    "resolve_relationships",
]
