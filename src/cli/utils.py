"""Shared CLI utilities."""

import sys
from pathlib import Path

import structlog
from rich.console import Console

console = Console()
logger = structlog.get_logger()


def get_components(
    config_path: Path | None = None, mode: str | None = None, ingest: bool = True
) -> dict:
    """Initialize store, oracle and coordinator from config.

    Args:
        config_path: Explicit config file (None = search standard locations)
        mode: Override for the configured ingestion mode
        ingest: Build the oracle and coordinator. Read-only commands pass
            False so they never touch the LLM factory.
    """
    from cli.config import load_config_model
    from contacts.coordinator import IngestionCoordinator
    from contacts.store import ContactStore

    config = load_config_model(config_path)
    store = ContactStore.open(config.paths.db_path)
    components = {"config": config, "store": store}

    if ingest:
        components["coordinator"] = IngestionCoordinator(
            store,
            _build_extractor(config),
            mode=mode or config.ingestion.mode,
        )
    return components


def components_or_exit(obj: dict | None, mode: str | None = None, ingest: bool = False) -> dict:
    """get_components for a command; config, storage and provider errors exit 1."""
    from contacts.errors import PeopleGraphError
    from llm import LLMError

    try:
        return get_components((obj or {}).get("config_path"), mode=mode, ingest=ingest)
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
    except (PeopleGraphError, LLMError) as e:
        logger.error("components_failed", error=str(e))
        console.print(f"[red]Error:[/] {e}")
    sys.exit(1)


def _build_extractor(config):
    """The configured oracle. The LLM provider itself is created on first use."""
    from contacts.extractor import NoteExtractor, RuleBasedExtractor
    from shared_types import ExtractorKind

    if config.ingestion.extractor == ExtractorKind.RULES:
        return RuleBasedExtractor()

    provider = None
    llm_cfg = config.llm
    if llm_cfg.provider != "auto" or llm_cfg.api_key or llm_cfg.model:
        from llm import create_llm_provider

        provider = create_llm_provider(
            provider=llm_cfg.provider, api_key=llm_cfg.api_key, model=llm_cfg.model
        )
    return NoteExtractor(
        provider=provider,
        tag_vocabulary=config.ingestion.tag_vocabulary,
        max_tokens=llm_cfg.max_tokens,
    )


def split_tags(value: str | None) -> list[str]:
    """Parse a comma-separated tag list from a prompt or option."""
    if not value:
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


def find_contact_or_exit(store, name: str):
    """Resolve a contact by exact (case-insensitive) name, else print and exit."""
    contact = store.find_by_name(name)
    if not contact:
        console.print(f"[red]Not found:[/] {name}")
        sys.exit(1)
    return contact
