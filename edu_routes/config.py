"""Layered configuration: YAML < .env < CLI args."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
import os

DEFAULTS: dict[str, Any] = {
    "max_records": 5000,
    "category_keyword": "mbbs",
    "output_dir": "./output",
    "logging": {"level": "INFO"},
}


def load_config(
    config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load configuration with layered precedence.

    Priority (highest to lowest):
    1. CLI argument overrides
    2. Environment variables (.env)
    3. YAML config file
    4. Built-in defaults

    Args:
        config_path: Path to YAML config file. Defaults to config/default.yaml
        cli_overrides: Dict of CLI argument overrides (e.g. {"category_keyword": "mba"})

    Returns:
        Merged configuration dict.
    """
    # 1. Load YAML over the defaults
    if config_path is None:
        config_path = Path("config/default.yaml")

    config: dict[str, Any] = {
        key: dict(value) if isinstance(value, dict) else value
        for key, value in DEFAULTS.items()
    }
    if config_path.exists():
        with open(config_path) as f:
            loaded = yaml.safe_load(f) or {}
        for key, value in loaded.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key].update(value)
            else:
                config[key] = value

    # 2. Load .env and apply environment variable overrides
    load_dotenv()
    env_mappings: dict[str, tuple[str, ...]] = {
        "RECORDS_SOURCE": ("records_source",),
        "CATEGORY_KEYWORD": ("category_keyword",),
        "OUTPUT_DIR": ("output_dir",),
        "LOG_LEVEL": ("logging", "level"),
    }
    for env_var, config_path_tuple in env_mappings.items():
        value = os.environ.get(env_var)
        if value:
            _set_nested(config, config_path_tuple, value)

    # 3. Apply CLI overrides (only non-None values)
    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def _set_nested(d: dict, keys: tuple[str, ...], value: Any) -> None:
    """Set a value in a nested dict using a tuple of keys."""
    for key in keys[:-1]:
        d = d.setdefault(key, {})
    d[keys[-1]] = value
