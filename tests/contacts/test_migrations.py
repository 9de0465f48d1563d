"""Tests for stored-contact migrations."""

import json

from contacts.migrations import CONTACT_SCHEMA_VERSION, ensure_tags_field, migrate_contacts

OLD = {
    "id": "c1",
    "name": "Sarah",
    "created_at": "2025-01-01T00:00:00+00:00",
    "last_interaction": "2025-01-01T00:00:00+00:00",
    "interaction_count": 2,
}


class TestEnsureTagsField:
    def test_backfills_missing_tags(self):
        assert ensure_tags_field([OLD]) == [{**OLD, "tags": []}]

    def test_keeps_existing_tags(self):
        record = {**OLD, "tags": ["work"]}
        result = ensure_tags_field([record])
        assert result[0] is record

    def test_replaces_non_list_tags(self):
        assert ensure_tags_field([{**OLD, "tags": None}])[0]["tags"] == []

    def test_does_not_mutate_input(self):
        record = dict(OLD)
        ensure_tags_field([record])
        assert "tags" not in record

    def test_idempotent_byte_identical(self):
        records = [OLD, {**OLD, "id": "c2", "tags": ["family"]}]
        once = ensure_tags_field(records)
        twice = ensure_tags_field(once)
        assert json.dumps(twice) == json.dumps(once)

    def test_empty(self):
        assert ensure_tags_field([]) == []


class TestMigrateContacts:
    def test_reports_applied_versions(self):
        records, applied = migrate_contacts([OLD])
        assert applied == [1]
        assert records[0]["tags"] == []

    def test_nothing_applied_when_current(self):
        records, applied = migrate_contacts([{**OLD, "tags": []}])
        assert applied == []

    def test_schema_version(self):
        assert CONTACT_SCHEMA_VERSION >= 1
