"""Configuration loader for LifeAssist."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

log = logging.getLogger(__name__)

# Folder inside the vault that holds config.yaml, data.json and logs
ASSISTANT_DIR = ".assistant"

DEFAULTS: dict = {
    "llm": {
        "base_url": "https://api.openai.com",
        # None disables the HTTP timeout entirely
        "timeout": None,
    },
    "context": {
        "max_tokens": 15000,
        "chars_per_token": 3.5,
        "separator": "\n\n---\n\n",
    },
    "vault": {
        "exclude": [".obsidian", ASSISTANT_DIR],
    },
    "ui": {
        "host": "127.0.0.1",
        "port": 8421,
        "open_browser": True,
    },
    "api": {
        "api_key": None,
        "cors_origins": [],
    },
    "logging": {
        "level": "warning",
    },
}


def resolve_vault() -> Path:
    """Resolve the vault root: LA_VAULT env var > current directory."""
    env_vault = os.environ.get("LA_VAULT")
    if env_vault:
        return Path(env_vault).expanduser().resolve()
    return Path.cwd().resolve()


def assistant_dir(vault: Path) -> Path:
    return vault / ASSISTANT_DIR


def config_path(vault: Path | None = None) -> Path:
    """Return the path to config.yaml."""
    if vault is None:
        vault = resolve_vault()
    return assistant_dir(vault) / "config.yaml"


def load_config(path: Path | None = None) -> dict:
    """Load config.yaml and merge with defaults.

    Args:
        path: Explicit path to config.yaml. If None, uses default location.

    Returns:
        Merged configuration dict.
    """
    if path is None:
        path = config_path()

    user_config: dict = {}
    if path.exists():
        try:
            raw = path.read_text(encoding="utf-8")
            user_config = yaml.safe_load(raw) or {}
        except (OSError, yaml.YAMLError):
            log.warning("Failed to read config at %s, using defaults", path, exc_info=True)
        if not isinstance(user_config, dict):
            log.warning("Config at %s is not a mapping, using defaults", path)
            user_config = {}

    return _deep_merge(DEFAULTS, user_config)


def load_vault_config(vault: Path) -> dict:
    """Load the config belonging to a vault."""
    return load_config(config_path(vault))


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "warning", log_file: Path | None = None) -> None:
    """Set up root logging to stderr, and to a file when one is given."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=handlers,
    )
