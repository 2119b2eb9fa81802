"""Structured logging for table operations.

Every module logs through structlog with dotted event names such as
``table.select.executed`` or ``connection.execute.failed``. Events are
rendered as one JSON object per line on stdlib logging, so they can be
captured by any handler the host application installs.

Statement text is logged at debug level and clipped to ``MAX_SQL_LENGTH``.
Bound values are never rendered: keys that carry them are replaced by the
number of values they held. Credentials are redacted by key name.

Environment:
- LOG_LEVEL: Level name. Default: INFO
- LOG_TO_FILE: Also write to a daily rotating file (1, true, yes)
- LOG_FILE_DIR: Directory for that file. Default: logs/

Usage:
    >>> from tablescribe.utils.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("table.select.executed", table="app_users", row_count=3)
"""

import logging
import os
import re
from datetime import date
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, MutableMapping, Optional, Sized

import structlog
from pydantic import ValidationError
from structlog.types import EventDict, Processor

from tablescribe.config import get_settings

# Keys whose values are credentials
SENSITIVE_PATTERNS = [
    re.compile(r".*password.*", re.IGNORECASE),
    re.compile(r".*token.*", re.IGNORECASE),
    re.compile(r".*secret.*", re.IGNORECASE),
    re.compile(r"^DATABASE_URL$", re.IGNORECASE),
]

# Keys whose values are statement parameters
BOUND_VALUE_KEYS = frozenset({"params", "values", "bound", "rows"})

REDACTED_VALUE = "[REDACTED]"
MAX_SQL_LENGTH = 2000

_HANDLER_MARK = "_tablescribe_handler"


def sanitize_for_logging(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``data`` with credential values replaced.

    Nested dictionaries are sanitized as well; the input is left untouched.

    Examples:
        >>> sanitize_for_logging({"password": "x", "table": "app_users"})
        {'password': '[REDACTED]', 'table': 'app_users'}
    """
    sanitized: Dict[str, Any] = {}
    for key, value in data.items():
        if any(pattern.match(key) for pattern in SENSITIVE_PATTERNS):
            sanitized[key] = REDACTED_VALUE
        elif isinstance(value, dict):
            sanitized[key] = sanitize_for_logging(value)
        else:
            sanitized[key] = value
    return sanitized


def sanitization_processor(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> MutableMapping[str, Any]:
    return sanitize_for_logging(dict(event_dict))


def bound_values_processor(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Replace statement parameters with their count."""
    for key in BOUND_VALUE_KEYS.intersection(event_dict):
        value = event_dict.pop(key)
        event_dict[f"{key}_count"] = len(value) if isinstance(value, Sized) else 1
    return event_dict


def sql_length_processor(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    sql = event_dict.get("sql")
    if isinstance(sql, str) and len(sql) > MAX_SQL_LENGTH:
        event_dict["sql"] = sql[:MAX_SQL_LENGTH] + "..."
        event_dict["sql_length"] = len(sql)
    return event_dict


def _resolve_level(level: Optional[str]) -> int:
    if level is None:
        try:
            level = get_settings().LOG_LEVEL
        except ValidationError:
            # A broken environment must not silence logging
            level = os.getenv("LOG_LEVEL", "INFO")
    return getattr(logging, level.upper(), logging.INFO)


def _file_handler() -> Optional[logging.Handler]:
    if os.getenv("LOG_TO_FILE", "").lower() not in ("1", "true", "yes"):
        return None
    log_dir = Path(os.getenv("LOG_FILE_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return TimedRotatingFileHandler(
        filename=str(log_dir / f"tablescribe-{date.today():%Y%m%d}.log"),
        when="midnight",
        backupCount=30,
        encoding="utf-8",
    )


def _install_handlers(level: int) -> None:
    """Attach stdout (and optional file) handlers, replacing earlier ones."""
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_MARK, False)]:
        root.removeHandler(handler)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    file_handler = _file_handler()
    if file_handler is not None:
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)
    root.setLevel(level)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structlog and the stdlib handlers it renders to.

    Args:
        level: Level name; taken from settings when omitted
    """
    resolved = _resolve_level(level)
    _install_handlers(resolved)

    processors: List[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        bound_values_processor,
        sql_length_processor,
        sanitization_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


def get_logger(name: str) -> Any:
    """Get a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> Any:
    """Create a logger with bound context fields.

    Example:
        >>> logger = bind_context(table="app_users", operation="select")
        >>> logger.info("table.select.executed", row_count=2)
    """
    return structlog.get_logger().bind(**kwargs)
