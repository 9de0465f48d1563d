"""Configuration loading."""

from pathlib import Path
from typing import Optional

import yaml

from .config_models import PeopleGraphConfig


def find_config() -> Optional[Path]:
    """Find config file in standard locations."""
    locations = [
        Path.cwd() / "config.yaml",
        Path.home() / ".peoplegraph" / "config.yaml",
    ]
    for loc in locations:
        if loc.exists():
            return loc
    return None


def load_config_model(config_path: Optional[Path] = None) -> PeopleGraphConfig:
    """Load configuration as Pydantic model with validation.

    Raises:
        ValueError: invalid YAML or values that fail validation
    """
    data = {}

    path = config_path or find_config()
    if path and path.exists():
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")

    try:
        return PeopleGraphConfig.model_validate(data)
    except Exception as e:
        raise ValueError(f"Config validation failed: {e}")
