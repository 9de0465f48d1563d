"""Pydantic configuration models for peoplegraph."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from shared_types import ExtractorKind, IngestionMode, RelationshipTag

VALID_LLM_PROVIDERS = {"auto", "claude", "openai"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LLMConfig(BaseModel):
    """LLM provider configuration for the extraction oracle."""

    provider: str = "auto"
    model: Optional[str] = None  # None = use provider default
    api_key: Optional[str] = None
    max_tokens: int = 1024

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_LLM_PROVIDERS:
            raise ValueError(f"Invalid LLM provider: {v}. Must be one of {VALID_LLM_PROVIDERS}")
        return v


class PathsConfig(BaseModel):
    """File paths configuration."""

    db_path: Path = Path("~/peoplegraph/peoplegraph.db")
    log_file: Optional[Path] = None

    @model_validator(mode="after")
    def expand_paths(self):
        self.db_path = self.db_path.expanduser()
        if self.log_file:
            self.log_file = self.log_file.expanduser()
        return self


class IngestionConfig(BaseModel):
    """How notes are parsed and matched."""

    mode: IngestionMode = IngestionMode.LOCAL
    extractor: ExtractorKind = ExtractorKind.LLM
    tag_vocabulary: list[str] = Field(default_factory=lambda: [t.value for t in RelationshipTag])

    @field_validator("tag_vocabulary")
    @classmethod
    def validate_vocabulary(cls, v: list[str]) -> list[str]:
        tags = []
        for tag in v:
            tag = tag.strip().lower()
            if tag == "untagged":
                raise ValueError("'untagged' is a filter, not an assignable tag")
            if tag and tag not in tags:
                tags.append(tag)
        return tags


class GraphConfig(BaseModel):
    """Relationship graph sizing and decay."""

    min_size: int = 5
    max_size: int = 15
    center_size: int = 20
    decay_per_day: float = 0.05
    min_strength: float = 0.1

    @model_validator(mode="after")
    def validate_ranges(self):
        if self.min_size > self.max_size:
            raise ValueError(f"min_size ({self.min_size}) exceeds max_size ({self.max_size})")
        if not 0.0 <= self.min_strength <= 1.0:
            raise ValueError(f"min_strength must be 0-1, got {self.min_strength}")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    json_output: bool = Field(default=False, alias="json")

    model_config = {"populate_by_name": True}

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class PeopleGraphConfig(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def expand_env_vars(self):
        """Expand ${VAR} patterns in the API key."""
        key = self.llm.api_key
        if key and key.startswith("${") and key.endswith("}"):
            self.llm.api_key = os.getenv(key[2:-1], "") or None
        return self
