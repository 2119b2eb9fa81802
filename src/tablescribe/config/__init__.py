"""Configuration management for tablescribe.

Usage:
    >>> from tablescribe.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.table_prefix)
"""

from tablescribe.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
