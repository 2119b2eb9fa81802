"""SQL dialect implementations."""

from .mysql import ORDER_ASC, ORDER_DESC, MySQLDialect

__all__ = ["MySQLDialect", "ORDER_ASC", "ORDER_DESC"]
