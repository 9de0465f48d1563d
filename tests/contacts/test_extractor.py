"""Tests for the LLM-backed and rule-based note extractors."""

import json

import pytest

from contacts.errors import ExtractionError
from contacts.extractor import NoteExtractor, RuleBasedExtractor
from llm import LLMError


class TestNoteExtractor:
    def test_happy_path(self, provider):
        result = NoteExtractor(provider=provider).extract("Sarah started at Stripe, Japan in April")

        assert result.extracted_name == "Sarah"
        assert result.extracted_notes == ["Started a new job at Stripe", "Japan trip in April"]
        assert result.tags == ["career", "travel"]
        assert result.suggested_tags == ["work"]
        provider.generate.assert_called_once()

    def test_prompt_contains_note_and_vocabulary(self, provider):
        NoteExtractor(provider=provider, tag_vocabulary=["friends", "climbing"]).extract("Sarah likes tea")

        kwargs = provider.generate.call_args.kwargs
        assert "Sarah likes tea" in kwargs["messages"][0]["content"]
        assert "friends, climbing" in kwargs["system"]
        assert "Known contacts" not in kwargs["messages"][0]["content"]

    def test_strips_code_fences(self, provider):
        provider.generate.return_value = (
            '```json\n{"extracted_name": "Tom", "extracted_notes": ["Got a dog"]}\n```'
        )
        result = NoteExtractor(provider=provider).extract("Tom got a dog")
        assert result.extracted_name == "Tom"

    def test_invalid_json(self, provider):
        provider.generate.return_value = "Sorry, I can't help with that."
        with pytest.raises(ExtractionError) as exc:
            NoteExtractor(provider=provider).extract("Tom got a dog")
        assert exc.value.raw_input == "Tom got a dog"

    def test_non_object_json(self, provider):
        provider.generate.return_value = '["Tom"]'
        with pytest.raises(ExtractionError):
            NoteExtractor(provider=provider).extract("Tom got a dog")

    @pytest.mark.parametrize(
        "payload",
        [
            {"extracted_notes": ["Got a dog"]},
            {"extracted_name": "Tom"},
            {"extracted_name": "Tom", "extracted_notes": []},
            {"extracted_name": "", "extracted_notes": ["Got a dog"]},
        ],
    )
    def test_missing_required_fields(self, provider, payload):
        provider.generate.return_value = json.dumps(payload)
        with pytest.raises(ExtractionError):
            NoteExtractor(provider=provider).extract("Tom got a dog")

    def test_provider_failure_becomes_extraction_error(self, provider):
        provider.generate.side_effect = LLMError("overloaded")
        with pytest.raises(ExtractionError, match="overloaded") as exc:
            NoteExtractor(provider=provider).extract("Tom got a dog")
        assert exc.value.raw_input == "Tom got a dog"

    def test_out_of_vocabulary_suggestions_dropped(self, provider):
        provider.generate.return_value = json.dumps(
            {
                "extracted_name": "Tom",
                "extracted_notes": ["Climbing partner"],
                "suggested_tags": ["Friends", "climbing"],
            }
        )
        result = NoteExtractor(provider=provider).extract("Tom climbs with me")
        assert result.suggested_tags == ["friends"]

    def test_roster_aware_prompt(self, provider):
        provider.generate.return_value = json.dumps(
            {
                "contact_name": "Sarah Lee",
                "is_new_contact": False,
                "confidence": 0.92,
                "extracted_notes": ["New job"],
            }
        )
        result = NoteExtractor(provider=provider).extract(
            "Sarah has a new job", known_contacts=["Sarah Lee", "Tom Baker"]
        )

        prompt = provider.generate.call_args.kwargs["messages"][0]["content"]
        assert "- Sarah Lee" in prompt
        assert "- Tom Baker" in prompt
        assert result.extracted_name == "Sarah Lee"
        assert result.is_new_contact is False
        assert result.confidence == 0.92

    def test_roster_aware_requires_new_contact_flag(self, provider):
        with pytest.raises(ExtractionError, match="new"):
            NoteExtractor(provider=provider).extract("Sarah has a new job", known_contacts=["Sarah Lee"])

    def test_empty_roster_still_roster_aware(self, provider):
        system, prompt = NoteExtractor(provider=provider).build_prompt("x", known_contacts=[])
        assert "(none)" in prompt

    def test_long_input_truncated_in_prompt(self, provider):
        _, prompt = NoteExtractor(provider=provider).build_prompt("a" * 10000)
        assert "a" * 4000 in prompt
        assert "a" * 4001 not in prompt


class TestRuleBasedExtractor:
    @pytest.mark.parametrize(
        "text,name",
        [
            ("Sarah — new job at Stripe, Japan trip in April", "Sarah"),
            ("Sarah Lee: new job at Stripe; Japan trip in April.", "Sarah Lee"),
            ("Sarah - new job at Stripe. Japan trip in April", "Sarah"),
        ],
    )
    def test_separators(self, text, name):
        result = RuleBasedExtractor().extract(text)
        assert result.extracted_name == name
        assert result.extracted_notes == ["new job at Stripe", "Japan trip in April"]
        assert result.tags == []
        assert result.suggested_tags == []

    def test_leading_capitalized_name(self):
        result = RuleBasedExtractor().extract("Tom Baker got a puppy")
        assert result.extracted_name == "Tom Baker"
        assert result.extracted_notes == ["got a puppy"]

    @pytest.mark.parametrize("text", ["lowercase note with no name", "Sarah —", "Sarah"])
    def test_unparseable(self, text):
        with pytest.raises(ExtractionError) as exc:
            RuleBasedExtractor().extract(text)
        assert exc.value.raw_input == text

    def test_roster_aware_flags(self):
        known = ["Sarah Lee", "Tom"]
        existing = RuleBasedExtractor().extract("sarah lee — likes tea", known_contacts=known)
        new = RuleBasedExtractor().extract("Priya — likes tea", known_contacts=known)

        assert existing.is_new_contact is False
        assert existing.confidence == 1.0
        assert new.is_new_contact is True
        assert new.confidence == 0.0

    def test_local_mode_leaves_flags_unset(self):
        result = RuleBasedExtractor().extract("Priya — likes tea")
        assert result.is_new_contact is None
        assert result.confidence is None
