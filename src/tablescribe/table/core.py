"""
Core Table class.

This module contains the Table class, which composes query, write, join,
schema-change and result-mapping operations from sibling modules using
mixins.
"""

from typing import Any, Dict, List, Optional, Union

from tablescribe.errors import ConfigurationError
from tablescribe.infrastructure.schema import (
    ColumnInfo,
    Reference,
    Relationship,
    SchemaChangeSet,
    SchemaReflector,
    TableSchema,
    resolve_relationships,
)
from tablescribe.infrastructure.sql.dialects import MySQLDialect
from tablescribe.infrastructure.sql.operations import (
    DeleteBuilder,
    InsertBuilder,
    SelectBuilder,
    UpdateBuilder,
)
from tablescribe.io.connection import Connection
from tablescribe.models.row import Entity, Row
from tablescribe.utils.logging import get_logger
from tablescribe.utils.naming import camel_to_snake

from .join_ops import JoinOpsMixin
from .mapping import ResultMappingMixin
from .query_ops import QueryOpsMixin
from .schema_ops import SchemaOpsMixin
from .state import JoinBuffer, PendingOperation
from .write_ops import WriteOpsMixin

logger = get_logger(__name__)


class Table(
    QueryOpsMixin,
    WriteOpsMixin,
    JoinOpsMixin,
    SchemaOpsMixin,
    ResultMappingMixin,
):
    """
    Query builder and schema view for one database table.

    The table name is snake_cased and prefixed with the connection's table
    prefix. When a connection is given the schema is reflected immediately
    and the relationships with other tables are resolved once.

    Composed using mixins for maintainability:
    - QueryOpsMixin: select, count, distinct, modifiers and execute
    - WriteOpsMixin: insert, update, delete and upsert
    - JoinOpsMixin: joins and seek_join over joined rows
    - SchemaOpsMixin: pending schema-change descriptions
    - ResultMappingMixin: rows to raw maps, JSON, or entities

    Example:
        >>> conn = Connection.from_settings()
        >>> users = Table("users", conn)
        >>> users.insert([{"id": "a1", "userName": "alice"}])
        1
        >>> users.select([{"id": "a1"}])[0].userName
        'alice'
    """

    def __init__(
        self,
        name: str,
        connection: Optional[Connection] = None,
        model: Optional[Entity] = None,
    ) -> None:
        """
        Initialize the table.

        Args:
            name: Table name; camelCased names are snake_cased and the
                connection's prefix is added when missing
            connection: Execution collaborator. Without one the table can only
                describe schema changes.
            model: Entity prototype copied for every fetched row
        """
        self._connection = connection
        self._name = self._qualified_name(name)
        self._model: Entity = model if model is not None else Row()

        self._dialect = MySQLDialect()
        self._select_builder = SelectBuilder(self._dialect)
        self._insert_builder = InsertBuilder(self._dialect)
        self._update_builder = UpdateBuilder(self._dialect)
        self._delete_builder = DeleteBuilder(self._dialect)

        self._schema = TableSchema()
        self._relationships: Dict[str, List[Relationship]] = {}
        self._pending = PendingOperation()
        self._join_buffer = JoinBuffer()
        self._changes = SchemaChangeSet()
        self._description: Optional[str] = None

        if connection is not None:
            self.refresh_schema()

    def __repr__(self) -> str:
        return f"Table({self._name!r})"

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def refresh_schema(self) -> "Table":
        """Reflect the table again and rebuild the relationship cache."""
        if self._connection is None:
            raise ConfigurationError("No connection bound", table=self._name)

        self._schema = SchemaReflector(self._connection).reflect(self._name)
        self._relationships = resolve_relationships(self._schema)
        self._model.set_relationships(self._relationships)
        logger.debug(
            "table.schema.refreshed",
            table=self._name,
            exists=self._schema.exists,
            relationship_count=sum(len(v) for v in self._relationships.values()),
        )
        return self

    def exists(self) -> bool:
        return self._schema.exists

    def get_columns(
        self, just_names: bool = False
    ) -> Union[List[str], Dict[str, ColumnInfo]]:
        if just_names:
            return list(self._schema.columns)
        return dict(self._schema.columns)

    def get_indexes(self, column: Optional[str] = None) -> Any:
        """All indexes as column -> index name, or the index name of one column."""
        if column is not None:
            return self._schema.indexes.get(column)
        return dict(self._schema.indexes)

    def get_references(self) -> Dict[str, Reference]:
        return dict(self._schema.references)

    def get_back_references(self) -> Dict[str, Any]:
        return dict(self._schema.back_references)

    def get_constraint_name(self, column: str) -> Optional[str]:
        reference = self._schema.references.get(column)
        return reference.constraint_name if reference else None

    @property
    def primary_key(self) -> Optional[str]:
        return self._schema.primary_key

    @property
    def relationships(self) -> Dict[str, List[Relationship]]:
        return self._relationships

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def connection(self) -> Optional[Connection]:
        return self._connection

    @property
    def model(self) -> Entity:
        return self._model

    def set_model(self, model: Entity) -> "Table":
        """Use another entity prototype for fetched rows."""
        self._model = model
        self._model.set_relationships(self._relationships)
        return self

    def last_insert_id(self) -> Optional[int]:
        self._require_connection()
        return self._connection.last_insert_id()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _qualified_name(self, name: str) -> str:
        """Snake-case the name and apply the table prefix unless already present."""
        prefix = self._connection.table_prefix if self._connection is not None else ""
        snake = camel_to_snake(name).lower()
        if prefix and snake.startswith(prefix):
            return snake
        return f"{prefix}{snake}"

    def _require_connection(self) -> None:
        if self._connection is None:
            self.reset()
            raise ConfigurationError("Invalid action. No connection found", table=self._name)

    def _check_ready(self) -> bool:
        """Raise without a connection; report whether the table exists."""
        self._require_connection()
        return self._schema.exists
