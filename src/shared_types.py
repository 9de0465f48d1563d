"""Shared enums and types for peoplegraph."""

from enum import StrEnum


class IngestionMode(StrEnum):
    LOCAL = "local"  # fuzzy-match the roster on this side, user disambiguates
    ORACLE = "oracle"  # the oracle sees the roster and picks the match


class ExtractorKind(StrEnum):
    LLM = "llm"
    RULES = "rules"


class RelationshipTag(StrEnum):
    FRIENDS = "friends"
    FAMILY = "family"
    WORK = "work"
