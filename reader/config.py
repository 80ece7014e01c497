"""Configuration loading from settings.yaml and .env."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# Environment variable -> dotted settings key it overrides
_ENV_OVERRIDES = {
    "STORYBOOK_STORY": "story.source",
    "STORYBOOK_STATE_FILE": "storage.state_file",
}


def get_setting(cfg: dict, dotted: str, default: Any = None) -> Any:
    """Look up ``"section.key"`` in a nested config dict."""
    node: Any = cfg
    for part in dotted.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return default if node is None else node


def _set_setting(cfg: dict, dotted: str, value: Any) -> None:
    *parents, leaf = dotted.split(".")
    node = cfg
    for part in parents:
        node = node.setdefault(part, {})
    node[leaf] = value


def load_config(
    config_dir: str | Path | None = None,
) -> dict:
    """Load settings.yaml and .env, return merged config dict."""
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent / "config"
    config_dir = Path(config_dir)

    # Load .env (silently skip if missing)
    load_dotenv(config_dir / ".env")

    settings_path = config_dir / "settings.yaml"
    if not settings_path.exists():
        raise FileNotFoundError(f"Config not found: {settings_path}")

    with open(settings_path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    for env_name, dotted in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            _set_setting(cfg, dotted, value)

    cfg["_config_dir"] = str(config_dir)
    return cfg
