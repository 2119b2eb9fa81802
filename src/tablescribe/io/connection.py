"""
Execution collaborator over a SQLAlchemy engine.

Tables hand composed statement text and parameters to ``do_prepare``. Select
and delete statements arrive with positional ``?`` markers, which are rewritten
into numbered named binds before the text is wrapped in ``text()``. Every
statement runs in its own connection and is committed immediately.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from tablescribe.config import Settings, get_settings
from tablescribe.errors import ConfigurationError, ExecutionError
from tablescribe.infrastructure.sql.core import positional_to_named
from tablescribe.utils.logging import get_logger

logger = get_logger(__name__)

PrepareResult = Union[List[Dict[str, Any]], int]


class Connection:
    """
    Runs statements for Table instances.

    Attributes:
        engine: SQLAlchemy Engine that owns the connection pool.
        db_name: Schema name used for INFORMATION_SCHEMA lookups.
        table_prefix: Prefix prepended to every table name.

    Example:
        >>> from sqlalchemy import create_engine
        >>> conn = Connection(create_engine("mysql+pymysql://u:p@localhost/app"))
        >>> conn.do_prepare("SELECT 1 AS `one` FROM DUAL WHERE 1 = ?", [1])
        [{'one': 1}]
    """

    def __init__(
        self,
        engine: Union[Engine, str],
        db_name: Optional[str] = None,
        table_prefix: str = "",
    ) -> None:
        """
        Initialize the connection.

        Args:
            engine: SQLAlchemy Engine, or a URL to build one from
            db_name: Schema name; defaults to the database of the engine URL
            table_prefix: Prefix prepended to every table name
        """
        if isinstance(engine, str):
            engine = create_engine(engine)
        self.engine = engine
        self._db_name = db_name if db_name is not None else (engine.url.database or "")
        self._table_prefix = table_prefix
        self._last_insert_id: Optional[int] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Connection":
        """
        Build a connection from application settings.

        Raises:
            ConfigurationError: If no database URL is configured
        """
        settings = settings or get_settings()
        if not settings.DATABASE_URL:
            raise ConfigurationError("DATABASE_URL is not configured")

        engine = create_engine(
            settings.DATABASE_URL,
            pool_size=settings.pool_size,
            pool_pre_ping=settings.pool_pre_ping,
            echo=settings.echo_sql,
        )
        return cls(
            engine,
            db_name=settings.get_database_name(),
            table_prefix=settings.table_prefix,
        )

    @property
    def db_name(self) -> str:
        return self._db_name

    @property
    def table_prefix(self) -> str:
        return self._table_prefix

    def last_insert_id(self) -> Optional[int]:
        """Auto-increment id produced by the most recent insert, if any."""
        return self._last_insert_id

    def do_prepare(
        self,
        sql: str,
        params: Any = None,
        multiple_rows: bool = False,
        model: Any = None,
    ) -> PrepareResult:
        """
        Execute one statement.

        Args:
            sql: Statement text with positional ``?`` or named ``:name`` binds
            params: Positional value list, a named dict, or a list of named
                dicts when ``multiple_rows`` is set
            multiple_rows: Execute once per parameter dict (executemany)
            model: Accepted for interface parity; rows are always returned
                as dicts and mapped by the caller

        Returns:
            List of row dicts for statements that return rows, otherwise the
            affected row count

        Raises:
            ExecutionError: If the driver rejects the statement
        """
        statement, bound = self._bind(sql, params, multiple_rows)
        logger.debug(
            "connection.execute.started",
            sql=statement,
            multiple_rows=multiple_rows,
            param_sets=len(bound) if isinstance(bound, list) else 1,
        )

        try:
            with self.engine.connect() as conn:
                result = conn.execute(text(statement), bound)
                if result.returns_rows:
                    rows: PrepareResult = [dict(row) for row in result.mappings()]
                else:
                    rows = result.rowcount
                    if not multiple_rows:
                        self._remember_insert_id(result)
                conn.commit()
        except SQLAlchemyError as exc:
            logger.error(
                "connection.execute.failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise ExecutionError(f"Statement execution failed: {exc}") from exc

        return rows

    @staticmethod
    def _bind(sql: str, params: Any, multiple_rows: bool) -> Any:
        if params is None:
            return sql, {}
        if multiple_rows:
            return sql, [dict(p) for p in params]
        if isinstance(params, dict):
            return sql, params
        if isinstance(params, Sequence) and not isinstance(params, (str, bytes)):
            return positional_to_named(sql, list(params))
        raise ExecutionError(f"Unsupported parameter container: {type(params).__name__}")

    def _remember_insert_id(self, result: Any) -> None:
        try:
            lastrowid = result.lastrowid
        except (AttributeError, SQLAlchemyError):
            return
        if lastrowid:
            self._last_insert_id = lastrowid
