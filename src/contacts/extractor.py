"""Note extraction oracles: turn a free-form note into an ExtractionResult.

Two interchangeable implementations share ``extract(text, known_contacts=None)``:
an LLM-backed parser and an offline rule-based one. Both either return a
fully validated result or raise ExtractionError.
"""

import json
import re
from collections.abc import Sequence

import structlog
from pydantic import ValidationError

from llm import LLMError

from .errors import ExtractionError
from .models import ExtractionResult
from .tags import DEFAULT_TAGS, normalize_tag

logger = structlog.get_logger()

_EXTRACTION_SYSTEM = """You are a note parser for a personal CRM. Extract the person's name and structured information from casual notes about people.

Rules:
- If multiple people are mentioned, focus on the primary subject.
- Each extracted note is a distinct, complete fact. Keep them concise but complete.
- "tags" are optional topical labels such as: career, family, travel, health, interests, plans.
- "suggested_tags" describe the relationship to the user. Only use labels from: {vocabulary}.
  Include a label only when the note makes it clear; otherwise leave the list empty.

Respond in JSON only, no markdown."""

_LOCAL_SHAPE = """{
  "extracted_name": "The person's name as mentioned in the note",
  "extracted_notes": ["Array of distinct facts/observations, each a complete thought"],
  "tags": ["optional topical tags"],
  "suggested_tags": ["optional relationship tags"]
}"""

_ROSTER_SHAPE = """{
  "contact_name": "Exact name from the known contacts if this is one of them, otherwise the name as mentioned",
  "is_new_contact": true,
  "confidence": 0.0,
  "extracted_notes": ["Array of distinct facts/observations, each a complete thought"],
  "tags": ["optional topical tags"],
  "suggested_tags": ["optional relationship tags"]
}"""

_ROSTER_CONTEXT = """Known contacts:
{contacts}

Decide whether the note is about one of the known contacts. If it is, copy that name exactly,
set "is_new_contact" to false and give your confidence between 0 and 1."""

MAX_INPUT_CHARS = 4000
MAX_KNOWN_CONTACTS = 500


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[-1]
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    return text.strip()


class NoteExtractor:
    """LLM-backed oracle."""

    def __init__(self, provider=None, tag_vocabulary: Sequence[str] = DEFAULT_TAGS, max_tokens: int = 1024):
        self._provider = provider
        self.tag_vocabulary = [normalize_tag(t) for t in tag_vocabulary]
        self.max_tokens = max_tokens

    def _get_provider(self):
        if self._provider:
            return self._provider
        from llm.factory import create_llm_provider

        self._provider = create_llm_provider()
        return self._provider

    def build_prompt(self, text: str, known_contacts: Sequence[str] | None = None) -> tuple[str, str]:
        """Return (system, user) prompt for a note."""
        system = _EXTRACTION_SYSTEM.format(vocabulary=", ".join(self.tag_vocabulary))
        parts = []
        if known_contacts is not None:
            names = "\n".join(f"- {name}" for name in known_contacts[:MAX_KNOWN_CONTACTS])
            parts.append(_ROSTER_CONTEXT.format(contacts=names or "(none)"))
            parts.append(f"Respond with this shape:\n{_ROSTER_SHAPE}")
        else:
            parts.append(f"Respond with this shape:\n{_LOCAL_SHAPE}")
        parts.append(f'Parse this input: "{text[:MAX_INPUT_CHARS]}"')
        return system, "\n\n".join(parts)

    def extract(self, text: str, known_contacts: Sequence[str] | None = None) -> ExtractionResult:
        system, prompt = self.build_prompt(text, known_contacts)
        try:
            response = self._get_provider().generate(
                messages=[{"role": "user", "content": prompt}],
                system=system,
                max_tokens=self.max_tokens,
            )
        except LLMError as e:
            logger.warning("extraction_failed", error=str(e))
            raise ExtractionError(f"Extraction service failed: {e}", raw_input=text) from e

        return self.parse_response(response, text, roster_aware=known_contacts is not None)

    def parse_response(self, response: str, text: str = "", roster_aware: bool = False) -> ExtractionResult:
        """Validate a raw oracle reply into an ExtractionResult."""
        cleaned = _strip_fences(response or "")
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.warning("extraction_parse_failed", response=cleaned[:200])
            raise ExtractionError("Extraction returned invalid JSON", raw_input=text) from e

        if not isinstance(data, dict):
            raise ExtractionError("Extraction returned an unexpected shape", raw_input=text)
        if roster_aware and "is_new_contact" not in data:
            raise ExtractionError("Extraction did not say whether the contact is new", raw_input=text)

        try:
            result = ExtractionResult.model_validate(data)
        except ValidationError as e:
            logger.warning("extraction_invalid", errors=e.error_count())
            raise ExtractionError(f"Extraction is missing required fields: {e}", raw_input=text) from e

        allowed = set(self.tag_vocabulary)
        kept = [t for t in result.suggested_tags if t in allowed]
        if len(kept) != len(result.suggested_tags):
            logger.debug("suggested_tags_dropped", dropped=sorted(set(result.suggested_tags) - allowed))
        return result.model_copy(update={"suggested_tags": kept})


_NAME_SEPARATORS = re.compile(r"\s*(?:—|–| - |:)\s*")
_LEADING_NAME = re.compile(r"^((?:[A-Z][\w'’-]*)(?:\s+[A-Z][\w'’-]*)*)")
_FACT_SPLIT = re.compile(r"[,;.\n]+")


class RuleBasedExtractor:
    """Offline oracle: "Name — fact, fact, fact" style notes, no tags."""

    def extract(self, text: str, known_contacts: Sequence[str] | None = None) -> ExtractionResult:
        body = text.strip()
        parts = _NAME_SEPARATORS.split(body, maxsplit=1)
        if len(parts) == 2:
            name, rest = parts
        else:
            match = _LEADING_NAME.match(body)
            if not match:
                raise ExtractionError("Could not find a name at the start of the note", raw_input=text)
            name, rest = match.group(1), body[match.end():]

        facts = [f.strip() for f in _FACT_SPLIT.split(rest) if f.strip()]
        if not name.strip() or not facts:
            raise ExtractionError("Could not find a name and at least one fact", raw_input=text)

        data = {"extracted_name": name, "extracted_notes": facts}
        if known_contacts is not None:
            known = {n.strip().lower() for n in known_contacts}
            is_new = name.strip().lower() not in known
            data.update(is_new_contact=is_new, confidence=0.0 if is_new else 1.0)
        return ExtractionResult.model_validate(data)
