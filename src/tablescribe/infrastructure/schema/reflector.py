"""
Schema reflection from INFORMATION_SCHEMA.

Three read-only metadata queries describe one table:

1. COLUMNS joined with STATISTICS: column definitions and index names
2. TABLE_CONSTRAINTS joined with KEY_COLUMN_USAGE and REFERENTIAL_CONSTRAINTS:
   primary key and forward references
3. KEY_COLUMN_USAGE filtered by REFERENCED_TABLE_NAME: back-references

A table that yields no column rows does not exist; reflection then returns an
empty schema rather than raising.
"""

from typing import TYPE_CHECKING, Any, Dict, List

from tablescribe.utils.logging import get_logger

from .models import BackReference, ColumnInfo, Reference, TableSchema

if TYPE_CHECKING:
    from tablescribe.io.connection import Connection

logger = get_logger(__name__)

COLUMNS_QUERY = """
    SELECT c.COLUMN_NAME AS col_name, c.COLUMN_DEFAULT AS col_default,
        c.IS_NULLABLE AS nullable, c.COLUMN_TYPE AS col_type, c.EXTRA AS extra,
        c.COLUMN_KEY AS col_key, c.CHARACTER_SET_NAME AS charset,
        c.COLLATION_NAME AS collation, d.INDEX_NAME AS index_name
    FROM INFORMATION_SCHEMA.COLUMNS c
    LEFT JOIN INFORMATION_SCHEMA.STATISTICS d
        ON c.COLUMN_NAME = d.COLUMN_NAME AND d.TABLE_SCHEMA = ? AND d.TABLE_NAME = ?
    WHERE c.TABLE_SCHEMA = ? AND c.TABLE_NAME = ?
    ORDER BY c.ORDINAL_POSITION
"""

REFERENCES_QUERY = """
    SELECT i.CONSTRAINT_NAME AS constraint_name, i.CONSTRAINT_TYPE AS constraint_type,
        j.COLUMN_NAME AS column_name, j.REFERENCED_TABLE_SCHEMA AS ref_schema,
        j.REFERENCED_TABLE_NAME AS ref_table, j.REFERENCED_COLUMN_NAME AS ref_column,
        k.UPDATE_RULE AS on_update, k.DELETE_RULE AS on_delete
    FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS i
    LEFT JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE j
        ON i.CONSTRAINT_NAME = j.CONSTRAINT_NAME AND j.TABLE_SCHEMA = ? AND j.TABLE_NAME = ?
    LEFT JOIN INFORMATION_SCHEMA.REFERENTIAL_CONSTRAINTS k
        ON i.CONSTRAINT_NAME = k.CONSTRAINT_NAME AND j.CONSTRAINT_SCHEMA = k.CONSTRAINT_SCHEMA
        AND k.TABLE_NAME = ?
    WHERE i.TABLE_SCHEMA = ? AND i.TABLE_NAME = ?
"""

BACK_REFERENCES_QUERY = """
    SELECT k.COLUMN_NAME AS ref_column, k.TABLE_SCHEMA AS ref_schema,
        k.TABLE_NAME AS ref_table, k.REFERENCED_COLUMN_NAME AS column_name
    FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE k
    WHERE k.TABLE_SCHEMA = ? AND k.REFERENCED_TABLE_NAME = ?
"""


class SchemaReflector:
    """
    Loads the metadata of one table through the execution collaborator.

    Example:
        >>> reflector = SchemaReflector(connection)
        >>> schema = reflector.reflect("app_users")
        >>> schema.primary_key
        'id'
    """

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection

    def reflect(self, table: str) -> TableSchema:
        """
        Reflect columns, references and back-references of a table.

        Args:
            table: Table name, already prefixed

        Returns:
            TableSchema; empty when the table does not exist
        """
        db_name = self.connection.db_name
        schema = TableSchema()

        self._load_columns(schema, db_name, table)
        if not schema.exists:
            logger.info("schema.reflect.table_missing", table=table, schema=db_name)
            return schema

        self._load_references(schema, db_name, table)
        self._load_back_references(schema, db_name, table)

        logger.debug(
            "schema.reflect.completed",
            table=table,
            column_count=len(schema.columns),
            reference_count=len(schema.references),
            back_reference_count=sum(len(v) for v in schema.back_references.values()),
        )
        return schema

    def _fetch(self, sql: str, params: List[Any]) -> List[Dict[str, Any]]:
        rows = self.connection.do_prepare(sql, params)
        return rows if isinstance(rows, list) else []

    def _load_columns(self, schema: TableSchema, db_name: str, table: str) -> None:
        rows = self._fetch(COLUMNS_QUERY, [db_name, table, db_name, table])
        for row in rows:
            column = ColumnInfo(
                name=row["col_name"],
                default=row.get("col_default"),
                nullable=str(row.get("nullable") or "").upper() == "YES",
                type=row.get("col_type") or "",
                extra=row.get("extra") or "",
                key=row.get("col_key") or "",
                charset=row.get("charset"),
                collation=row.get("collation"),
                index_name=row.get("index_name"),
            )
            # A column with several indexes appears once per index; last wins
            schema.columns[column.name] = column
            if column.is_indexed:
                schema.indexes[column.name] = column.index_name

    def _load_references(self, schema: TableSchema, db_name: str, table: str) -> None:
        rows = self._fetch(
            REFERENCES_QUERY, [db_name, table, table, db_name, table]
        )
        for row in rows:
            column = row.get("column_name")
            if row.get("constraint_type") == "PRIMARY KEY":
                if column and schema.primary_key is None:
                    schema.primary_key = column
                continue
            if not row.get("ref_table") or not column:
                continue
            schema.references[column] = Reference(
                constraint_name=row["constraint_name"],
                table=row["ref_table"],
                column=row["ref_column"],
                schema=row.get("ref_schema"),
                on_delete=row.get("on_delete"),
                on_update=row.get("on_update"),
            )

    def _load_back_references(
        self, schema: TableSchema, db_name: str, table: str
    ) -> None:
        rows = self._fetch(BACK_REFERENCES_QUERY, [db_name, table])
        for row in rows:
            schema.back_references.setdefault(row["column_name"], []).append(
                BackReference(
                    table=row["ref_table"],
                    column=row["ref_column"],
                    schema=row.get("ref_schema"),
                )
            )
