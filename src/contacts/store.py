"""Persistence for contacts and notes: JSON collections in a SQLite key-value table."""

import json
import sqlite3
from pathlib import Path

import structlog
from pydantic import BaseModel, ValidationError

from db import RECORDS_TABLE, wal_connect

from .errors import ContactNotFoundError, StorageError
from .migrations import migrate_contacts
from .models import Contact, Note
from .tags import toggle_tag

logger = structlog.get_logger()

CONTACTS = "contacts"
NOTES = "notes"
DRAFT = "draft"


class RecordStore:
    """Whole-value get/set by collection name. Last write wins."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        try:
            with wal_connect(self.db_path) as conn:
                conn.execute(RECORDS_TABLE)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open store at {self.db_path}: {e}") from e

    def get(self, name: str) -> str | None:
        try:
            with wal_connect(self.db_path) as conn:
                row = conn.execute("SELECT value FROM records WHERE name = ?", (name,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read '{name}': {e}") from e
        return row[0] if row else None

    def set(self, name: str, value: str) -> None:
        self.set_many({name: value})

    def set_many(self, values: dict[str, str]) -> None:
        """Write several collections in a single transaction."""
        try:
            with wal_connect(self.db_path) as conn:
                conn.executemany(
                    """INSERT INTO records (name, value, updated_at)
                       VALUES (?, ?, CURRENT_TIMESTAMP)
                       ON CONFLICT(name) DO UPDATE SET
                           value = excluded.value, updated_at = excluded.updated_at""",
                    list(values.items()),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {sorted(values)}: {e}") from e

    def delete(self, name: str) -> None:
        try:
            with wal_connect(self.db_path) as conn:
                conn.execute("DELETE FROM records WHERE name = ?", (name,))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete '{name}': {e}") from e


def _dump(models: list[BaseModel], kept=()) -> str:
    return json.dumps([m.model_dump(mode="json") for m in models] + list(kept))


class ContactStore:
    """Roster and note collections on top of a RecordStore.

    Stored items that fail validation are skipped on read but carried
    through every rewrite unchanged, so nothing is repaired or lost
    behind the user's back.
    """

    def __init__(self, records: RecordStore):
        self.records = records

    @classmethod
    def open(cls, db_path: str | Path) -> "ContactStore":
        return cls(RecordStore(db_path))

    def _load_raw(self, name: str) -> list:
        """Decode a collection. Corrupt values read as empty and are left as-is."""
        raw = self.records.get(name)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("collection_corrupt", collection=name, error=str(e))
            return []
        if not isinstance(data, list):
            logger.error("collection_corrupt", collection=name, error="not a list")
            return []
        return data

    def _partition(self, name: str, items: list, model: type[BaseModel], quiet: bool = False):
        """Split raw items into (valid models, raw items that failed validation)."""
        valid, skipped = [], []
        for item in items:
            try:
                valid.append(model.model_validate(item))
            except ValidationError as e:
                skipped.append(item)
                if not quiet:
                    logger.warning(
                        "record_invalid",
                        collection=name,
                        record_id=item.get("id") if isinstance(item, dict) else None,
                        error=str(e),
                    )
        return valid, skipped

    def _skipped(self, name: str) -> list:
        """Raw items currently stored under ``name`` that don't validate."""
        if name == CONTACTS:
            items, _ = migrate_contacts(self._load_raw(CONTACTS))
            return self._partition(CONTACTS, items, Contact, quiet=True)[1]
        return self._partition(NOTES, self._load_raw(NOTES), Note, quiet=True)[1]

    # --- contacts ---

    def get_contacts(self) -> list[Contact]:
        """Load the roster, upgrading older records first."""
        items = self._load_raw(CONTACTS)
        items, applied = migrate_contacts(items)
        if applied:
            self.records.set(CONTACTS, json.dumps(items))
            logger.info("contacts_migrated", count=len(items), versions=applied)
        return self._partition(CONTACTS, items, Contact)[0]

    def save_contacts(self, contacts: list[Contact]) -> None:
        self.records.set(CONTACTS, _dump(contacts, self._skipped(CONTACTS)))

    def get_contact(self, contact_id: str) -> Contact | None:
        return next((c for c in self.get_contacts() if c.id == contact_id), None)

    def find_by_name(self, name: str) -> Contact | None:
        """Case-insensitive exact name lookup, first in roster order."""
        key = name.strip().lower()
        return next((c for c in self.get_contacts() if c.name.strip().lower() == key), None)

    def toggle_contact_tag(self, contact_id: str, tag: str) -> Contact:
        contacts = self.get_contacts()
        for i, contact in enumerate(contacts):
            if contact.id == contact_id:
                updated = contact.model_copy(update={"tags": toggle_tag(contact.tags, tag)})
                contacts[i] = updated
                self.save_contacts(contacts)
                return updated
        raise ContactNotFoundError(f"Contact not found: {contact_id}")

    # --- notes ---

    def get_notes(self) -> list[Note]:
        return self._partition(NOTES, self._load_raw(NOTES), Note)[0]

    def save_notes(self, notes: list[Note]) -> None:
        self.records.set(NOTES, _dump(notes, self._skipped(NOTES)))

    def notes_for(self, contact_id: str) -> list[Note]:
        return [n for n in self.get_notes() if n.contact_id == contact_id]

    def commit(self, contacts: list[Contact], notes: list[Note]) -> None:
        """Rewrite both collections together so neither write is seen alone."""
        self.records.set_many(
            {
                CONTACTS: _dump(contacts, self._skipped(CONTACTS)),
                NOTES: _dump(notes, self._skipped(NOTES)),
            }
        )

    # --- draft of a failed ingestion ---

    def save_draft(self, raw_input: str) -> None:
        self.records.set(DRAFT, raw_input)

    def load_draft(self) -> str | None:
        return self.records.get(DRAFT)

    def clear_draft(self) -> None:
        self.records.delete(DRAFT)
