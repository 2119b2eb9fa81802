"""Core SQL utilities package."""

from .identifier import qualify_column, quote_identifier
from .parameters import (
    bind_name,
    build_row_placeholders,
    positional_to_named,
    row_param_name,
)

__all__ = [
    "quote_identifier",
    "qualify_column",
    "bind_name",
    "build_row_placeholders",
    "positional_to_named",
    "row_param_name",
]
