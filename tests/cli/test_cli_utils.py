"""Tests for CLI component wiring."""

from unittest.mock import patch

from cli.config_models import PeopleGraphConfig
from cli.utils import _build_extractor, get_components, split_tags
from contacts.coordinator import IngestionCoordinator
from contacts.extractor import NoteExtractor, RuleBasedExtractor
from shared_types import IngestionMode


def test_split_tags():
    assert split_tags(None) == []
    assert split_tags("") == []
    assert split_tags("work, friends,,") == ["work", "friends"]


class TestBuildExtractor:
    def test_rules(self):
        config = PeopleGraphConfig.model_validate({"ingestion": {"extractor": "rules"}})
        assert isinstance(_build_extractor(config), RuleBasedExtractor)

    def test_llm_provider_created_lazily(self):
        with patch("llm.create_llm_provider") as create:
            extractor = _build_extractor(PeopleGraphConfig())
        assert isinstance(extractor, NoteExtractor)
        create.assert_not_called()

    def test_llm_explicit_provider(self):
        config = PeopleGraphConfig.model_validate(
            {"llm": {"provider": "openai", "model": "gpt-4o"}, "ingestion": {"tag_vocabulary": ["work"]}}
        )
        with patch("llm.create_llm_provider") as create:
            extractor = _build_extractor(config)
        create.assert_called_once_with(provider="openai", api_key=None, model="gpt-4o")
        assert extractor.tag_vocabulary == ["work"]


class TestGetComponents:
    def test_wires_store_and_coordinator(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(f"paths:\n  db_path: {tmp_path / 'pg.db'}\ningestion:\n  extractor: rules\n")

        c = get_components(path)

        assert isinstance(c["coordinator"], IngestionCoordinator)
        assert c["coordinator"].mode == IngestionMode.LOCAL
        assert c["store"].records.db_path == tmp_path / "pg.db"

    def test_mode_override(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(f"paths:\n  db_path: {tmp_path / 'pg.db'}\ningestion:\n  extractor: rules\n")
        assert get_components(path, mode="oracle")["coordinator"].mode == IngestionMode.ORACLE

    def test_read_only_components(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(f"paths:\n  db_path: {tmp_path / 'pg.db'}\nllm:\n  provider: openai\n")
        with patch("llm.create_llm_provider") as create:
            c = get_components(path, ingest=False)
        assert "coordinator" not in c
        create.assert_not_called()
