"""Entity models populated from and persisted to tables."""

from .row import Entity, Row

__all__ = ["Entity", "Row"]
