"""Ingestion coordinator: orchestrates extract -> match -> (user picks) -> commit."""

from collections.abc import Callable, Sequence
from datetime import datetime

import structlog

from observability import metrics
from shared_types import IngestionMode

from .errors import ContactNotFoundError, ExtractionError, IngestionBusyError
from .matcher import match_contacts
from .models import Contact, ContactMatch, Note, PendingDecision, utc_now
from .store import ContactStore
from .tags import reconcile_tags

logger = structlog.get_logger()


class IngestionCoordinator:
    """Runs one note at a time from raw text to a committed Contact + Note.

    ``ingest`` only reads; nothing is written until ``commit`` is called
    with the user's choice. At most one decision is pending at a time.
    """

    def __init__(
        self,
        store: ContactStore,
        extractor,
        mode: IngestionMode = IngestionMode.LOCAL,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.extractor = extractor
        self.mode = IngestionMode(mode)
        self.clock = clock
        self._processing = False
        self._pending: PendingDecision | None = None

    @property
    def processing(self) -> bool:
        return self._processing

    @property
    def pending(self) -> PendingDecision | None:
        return self._pending

    def ingest(self, raw_text: str) -> PendingDecision:
        """Extract a note and rank candidate contacts, without committing.

        Raises:
            ValueError: blank input
            IngestionBusyError: another ingestion is waiting on the oracle
            ExtractionError: the oracle failed; the raw text is kept as a draft
        """
        if not raw_text or not raw_text.strip():
            raise ValueError("Note text is empty")
        if self._processing:
            raise IngestionBusyError("A note is already being processed")

        self._processing = True
        self._pending = None
        try:
            roster = self.store.get_contacts()
            known = [c.name for c in roster] if self.mode == IngestionMode.ORACLE else None
            try:
                with metrics.timer("oracle.extract"):
                    extraction = self.extractor.extract(raw_text, known_contacts=known)
            except ExtractionError as e:
                e.raw_input = raw_text
                metrics.counter("ingest.failed")
                self.store.save_draft(raw_text)
                logger.warning("ingest.failed", mode=self.mode.value, error=str(e))
                raise
        finally:
            self._processing = False

        if self.mode == IngestionMode.ORACLE:
            decision = self._decide_from_oracle(raw_text, extraction, roster)
        else:
            decision = PendingDecision(
                raw_input=raw_text,
                extraction=extraction,
                matches=match_contacts(extraction.extracted_name, roster),
                mode=self.mode,
            )

        metrics.counter("ingest.extracted")
        logger.info(
            "ingest.extracted",
            mode=self.mode.value,
            facts=len(extraction.extracted_notes),
            matches=len(decision.matches),
        )
        self._pending = decision
        return decision

    def _decide_from_oracle(
        self, raw_text: str, extraction, roster: Sequence[Contact]
    ) -> PendingDecision:
        """Trust the oracle's pick only if that name exists locally."""
        proposed = None
        if extraction.is_new_contact is False:
            key = extraction.extracted_name.strip().lower()
            proposed = next((c for c in roster if c.name.strip().lower() == key), None)
            if proposed is None:
                logger.info("ingest.oracle_match_missing", name=extraction.extracted_name)

        confidence = extraction.confidence if extraction.confidence is not None else 0.0
        matches = [ContactMatch(contact=proposed, score=confidence)] if proposed else []
        return PendingDecision(
            raw_input=raw_text,
            extraction=extraction,
            matches=matches,
            mode=self.mode,
            proposed=proposed,
            oracle_confidence=extraction.confidence,
        )

    def discard(self, decision: PendingDecision | None = None) -> None:
        """Drop the pending decision. Nothing was written, so nothing to undo."""
        if decision is None or decision is self._pending:
            self._pending = None

    def commit(
        self,
        decision: PendingDecision,
        chosen: Contact | None,
        confirmed_tags: Sequence[str] = (),
    ) -> tuple[Contact, Note]:
        """Write one contact upsert plus one note insert.

        Args:
            decision: The pending extraction.
            chosen: Existing contact to attach to, or None to create one
                named after the extracted name.
            confirmed_tags: Relationship tags the user confirmed.
        """
        now = self.clock().isoformat()
        contacts = self.store.get_contacts()

        if chosen is None:
            contact = Contact(
                name=decision.extracted_name,
                created_at=now,
                last_interaction=now,
                interaction_count=1,
                tags=reconcile_tags([], confirmed=confirmed_tags),
            )
            contacts = [contact, *contacts]
            metrics.counter("commit.new_contact")
        else:
            index = next((i for i, c in enumerate(contacts) if c.id == chosen.id), None)
            if index is None:
                raise ContactNotFoundError(f"Contact no longer exists: {chosen.name}")
            current = contacts[index]
            contact = current.model_copy(
                update={
                    "last_interaction": now,
                    "interaction_count": current.interaction_count + 1,
                    "tags": reconcile_tags(current.tags, confirmed=confirmed_tags),
                }
            )
            contacts[index] = contact
            metrics.counter("commit.existing_contact")

        note = Note(
            contact_id=contact.id,
            content=decision.extraction.note_content(),
            raw_input=decision.raw_input,
            created_at=now,
            tags=list(decision.extraction.tags),
        )
        self.store.commit(contacts, [note, *self.store.get_notes()])
        self.store.clear_draft()
        self.discard(decision)

        logger.info(
            "ingest.committed",
            contact_id=contact.id,
            new_contact=chosen is None,
            interaction_count=contact.interaction_count,
        )
        return contact, note
