"""Tests for config loading and validation."""

from pathlib import Path

import pytest

from cli.config import find_config, load_config_model
from cli.config_models import GraphConfig, IngestionConfig, LLMConfig, LoggingConfig, PeopleGraphConfig
from shared_types import ExtractorKind, IngestionMode


class TestDefaults:
    def test_no_file_gives_defaults(self, tmp_path):
        config = load_config_model(tmp_path / "missing.yaml")
        assert config.ingestion.mode == IngestionMode.LOCAL
        assert config.ingestion.extractor == ExtractorKind.LLM
        assert config.ingestion.tag_vocabulary == ["friends", "family", "work"]
        assert config.llm.provider == "auto"
        assert config.logging.level == "WARNING"
        assert config.logging.json_output is False
        assert config.graph.center_size == 20

    def test_db_path_expanded(self):
        assert "~" not in str(PeopleGraphConfig().paths.db_path)


class TestLoading:
    def test_values_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "ingestion:\n"
            "  mode: oracle\n"
            "  extractor: rules\n"
            "logging:\n"
            "  level: debug\n"
            "  json: true\n"
            f"paths:\n  db_path: {tmp_path / 'x.db'}\n"
        )
        config = load_config_model(path)
        assert config.ingestion.mode == IngestionMode.ORACLE
        assert config.ingestion.extractor == ExtractorKind.RULES
        assert config.logging.level == "DEBUG"
        assert config.logging.json_output is True
        assert config.paths.db_path == tmp_path / "x.db"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config_model(path) == PeopleGraphConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("ingestion: [unclosed")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config_model(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config_model(path)

    def test_validation_error(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("llm:\n  provider: gemini\n")
        with pytest.raises(ValueError, match="validation failed"):
            load_config_model(path)

    def test_find_config_in_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(Path, "home", lambda: tmp_path / "home")
        assert find_config() is None
        (tmp_path / "config.yaml").write_text("{}")
        assert find_config() == tmp_path / "config.yaml"

    def test_find_config_in_home(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        home = tmp_path / "home"
        (home / ".peoplegraph").mkdir(parents=True)
        (home / ".peoplegraph" / "config.yaml").write_text("{}")
        monkeypatch.setattr(Path, "home", lambda: home)
        assert find_config() == home / ".peoplegraph" / "config.yaml"


class TestModels:
    def test_api_key_env_expansion(self, monkeypatch):
        monkeypatch.setenv("PG_TEST_KEY", "sk-ant-secret")
        config = PeopleGraphConfig.model_validate({"llm": {"api_key": "${PG_TEST_KEY}"}})
        assert config.llm.api_key == "sk-ant-secret"

    def test_api_key_env_missing(self, monkeypatch):
        monkeypatch.delenv("PG_TEST_KEY", raising=False)
        config = PeopleGraphConfig.model_validate({"llm": {"api_key": "${PG_TEST_KEY}"}})
        assert config.llm.api_key is None

    def test_invalid_provider(self):
        with pytest.raises(ValueError):
            LLMConfig(provider="gemini")

    def test_vocabulary_normalized(self):
        config = IngestionConfig(tag_vocabulary=["Friends", " work", "friends", "climbing"])
        assert config.tag_vocabulary == ["friends", "work", "climbing"]

    def test_untagged_not_in_vocabulary(self):
        with pytest.raises(ValueError):
            IngestionConfig(tag_vocabulary=["untagged"])

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            IngestionConfig(mode="telepathy")

    def test_graph_ranges(self):
        with pytest.raises(ValueError):
            GraphConfig(min_size=20, max_size=10)
        with pytest.raises(ValueError):
            GraphConfig(min_strength=1.5)

    def test_log_level(self):
        assert LoggingConfig(level="info").level == "INFO"
        with pytest.raises(ValueError):
            LoggingConfig(level="LOUD")
