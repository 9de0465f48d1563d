"""Build the extraction oracle's LLM provider from config, key or environment."""

import importlib
import os

from .base import LLMError, LLMProvider

# name -> (env var holding the key, "module:Class" relative to llm.providers)
PROVIDERS = {
    "claude": ("ANTHROPIC_API_KEY", "claude:ClaudeProvider"),
    "openai": ("OPENAI_API_KEY", "openai:OpenAIProvider"),
}

# Checked in this order when nothing is configured
_AUTO_DETECT_ORDER = ("claude", "openai")


def create_llm_provider(
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    client=None,
) -> LLMProvider:
    """Create a provider instance.

    Args:
        provider: "claude", "openai", "auto", or None (auto-detect)
        api_key: Explicit API key (overrides env var)
        model: Model name (None = provider default)
        client: Pre-built SDK client, mainly for tests

    Raises:
        LLMError: unknown provider, or no key found during auto-detection
    """
    name = provider or "auto"
    if name == "auto":
        name = _auto_detect_provider(api_key)

    if name not in PROVIDERS:
        raise LLMError(f"Unknown provider: {name}. Use: {', '.join(PROVIDERS)}")

    env_var, target = PROVIDERS[name]
    if not api_key and not client:
        api_key = os.getenv(env_var)

    module_name, class_name = target.split(":")
    module = importlib.import_module(f".providers.{module_name}", __package__)
    return getattr(module, class_name)(api_key=api_key, model=model, client=client)


def _detect_provider_from_key(api_key: str) -> str | None:
    """Infer provider from API key prefix."""
    if api_key.startswith("sk-ant-"):
        return "claude"
    if api_key.startswith("sk-"):
        return "openai"
    return None


def _auto_detect_provider(api_key: str | None = None) -> str:
    """Explicit key prefix first, then whichever env var is set."""
    inferred = _detect_provider_from_key(api_key) if api_key else None
    if inferred:
        return inferred

    for name in _AUTO_DETECT_ORDER:
        if os.getenv(PROVIDERS[name][0]):
            return name
    raise LLMError("No LLM API key found. Set ANTHROPIC_API_KEY or OPENAI_API_KEY")
