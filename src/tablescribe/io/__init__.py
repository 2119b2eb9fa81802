"""I/O layer: the execution collaborator that runs composed statements."""

from .connection import Connection

__all__ = ["Connection"]
