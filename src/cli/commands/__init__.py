"""CLI command modules."""

from .contacts import contacts
from .graph import graph
from .note import note

__all__ = [
    "contacts",
    "graph",
    "note",
]
