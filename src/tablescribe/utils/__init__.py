"""Shared utilities: structured logging and name casing."""

from .naming import camel_to_snake, snake_to_camel

__all__ = [
    "camel_to_snake",
    "snake_to_camel",
]
