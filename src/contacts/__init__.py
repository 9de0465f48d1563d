"""Contacts: note ingestion, contact matching, tags and the relationship graph."""

from .coordinator import IngestionCoordinator
from .errors import (
    ContactNotFoundError,
    ExtractionError,
    IngestionBusyError,
    PeopleGraphError,
    StorageError,
)
from .graph import GraphModel, build_graph, filter_roster
from .matcher import match_contacts
from .migrations import ensure_tags_field, migrate_contacts
from .models import Contact, ContactMatch, ExtractionResult, Note, PendingDecision
from .store import ContactStore, RecordStore
from .tags import reconcile_tags, toggle_tag

__all__ = [
    "Contact",
    "ContactMatch",
    "ContactNotFoundError",
    "ContactStore",
    "ExtractionError",
    "ExtractionResult",
    "GraphModel",
    "IngestionBusyError",
    "IngestionCoordinator",
    "Note",
    "PeopleGraphError",
    "PendingDecision",
    "RecordStore",
    "StorageError",
    "build_graph",
    "ensure_tags_field",
    "filter_roster",
    "match_contacts",
    "migrate_contacts",
    "reconcile_tags",
    "toggle_tag",
]
