"""Data models for contacts, notes and the oracle's extraction result."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, Field, field_validator

from shared_types import IngestionMode

NOTE_SEPARATOR = "\n"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def _distinct(values: list[str]) -> list[str]:
    """Strip, drop blanks and drop repeats, keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        text = value.strip()
        if text and text not in seen:
            seen.add(text)
            result.append(text)
    return result


def _normalize_tags(values: list[str]) -> list[str]:
    return _distinct([v.lower() for v in values])


class Contact(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    created_at: str
    last_interaction: str
    interaction_count: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)

    @field_validator("created_at", "last_interaction")
    @classmethod
    def validate_timestamp(cls, v: str) -> str:
        """Must parse as ISO 8601; the graph builder does date arithmetic on it."""
        try:
            datetime.fromisoformat(v)
        except ValueError:
            raise ValueError(f"not an ISO 8601 timestamp: {v!r}")
        return v

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        return _normalize_tags(v)


class Note(BaseModel):
    id: str = Field(default_factory=new_id)
    contact_id: str
    content: str
    raw_input: str
    created_at: str
    tags: list[str] | None = None

    @property
    def facts(self) -> list[str]:
        return [line for line in self.content.split(NOTE_SEPARATOR) if line.strip()]


class ExtractionResult(BaseModel):
    """Structured oracle output.

    ``contact_name`` is accepted for ``extracted_name`` because the
    roster-aware prompt asks for the name of a (possibly existing) contact.
    """

    extracted_name: str = Field(
        validation_alias=AliasChoices("extracted_name", "contact_name"), min_length=1
    )
    extracted_notes: list[str] = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    suggested_tags: list[str] = Field(default_factory=list)
    is_new_contact: bool | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("extracted_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("extracted_name is blank")
        return v

    @field_validator("extracted_notes")
    @classmethod
    def distinct_notes(cls, v: list[str]) -> list[str]:
        notes = _distinct(v)
        if not notes:
            raise ValueError("extracted_notes has no statements")
        return notes

    @field_validator("tags", "suggested_tags", mode="before")
    @classmethod
    def tags_default(cls, v):
        return [] if v is None else v

    @field_validator("tags", "suggested_tags")
    @classmethod
    def normalize(cls, v: list[str]) -> list[str]:
        return _normalize_tags(v)

    def note_content(self) -> str:
        return NOTE_SEPARATOR.join(self.extracted_notes)


@dataclass
class ContactMatch:
    contact: Contact
    score: float


@dataclass
class PendingDecision:
    """An extraction waiting for the user to pick a target contact.

    Nothing is persisted until the coordinator commits it.
    """

    raw_input: str
    extraction: ExtractionResult
    matches: list[ContactMatch] = field(default_factory=list)
    mode: IngestionMode = IngestionMode.LOCAL
    proposed: Contact | None = None
    oracle_confidence: float | None = None

    @property
    def extracted_name(self) -> str:
        return self.extraction.extracted_name

    @property
    def suggested_tags(self) -> list[str]:
        return list(self.extraction.suggested_tags)
