"""Persistent assistant settings and the conversation log (data.json)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from lifeassist.core.config import assistant_dir
from lifeassist.core.fileutil import atomic_write, file_lock
from lifeassist.core.models import ConversationEntry

log = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

SUPPORTED_MODELS: list[str] = [
    "o4-mini",
    "gpt-4.1-mini",
    "gpt-4.1-nano",
    "gpt-4o-mini",
]

KEYRING_SERVICE = "lifeassist"
KEYRING_ENTRY = "openai_api_key"

_KNOWN_KEYS = {
    "openAiApiKey",
    "defaultModel",
    "promptFilePath",
    "promptFilesFolderPath",
    "chatHistory",
}


@dataclass
class Settings:
    """User settings. Serialized with the same keys the panel always used."""

    api_key: str = ""
    default_model: str = DEFAULT_MODEL
    prompt_file_path: str = ""
    prompt_files_folder_path: str = ""
    chat_history: list[ConversationEntry] = field(default_factory=list)
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = dict(self.extra)
        data.update({
            "openAiApiKey": self.api_key,
            "defaultModel": self.default_model,
            "promptFilePath": self.prompt_file_path,
            "promptFilesFolderPath": self.prompt_files_folder_path,
            "chatHistory": [e.to_dict() for e in self.chat_history],
        })
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Settings:
        history = data.get("chatHistory")
        if not isinstance(history, list):
            history = []
        return cls(
            api_key=data.get("openAiApiKey") or "",
            default_model=data.get("defaultModel") or DEFAULT_MODEL,
            prompt_file_path=data.get("promptFilePath") or "",
            prompt_files_folder_path=data.get("promptFilesFolderPath") or "",
            chat_history=[
                ConversationEntry.from_dict(e) for e in history if isinstance(e, dict)
            ],
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def masked_key(self) -> str:
        if not self.api_key:
            return ""
        if len(self.api_key) <= 8:
            return "*" * len(self.api_key)
        return f"{self.api_key[:3]}...{self.api_key[-4:]}"


def settings_path(vault: Path) -> Path:
    return assistant_dir(vault) / "data.json"


class SettingsStore:
    """Load and save Settings for one vault."""

    def __init__(self, vault: Path) -> None:
        self.vault = vault
        self.path = settings_path(vault)

    def load(self) -> Settings:
        """Load settings; missing or unreadable files yield defaults."""
        if not self.path.exists():
            return Settings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, json.JSONDecodeError):
            log.warning("Failed to read settings at %s, using defaults", self.path, exc_info=True)
            return Settings()
        if not isinstance(data, dict):
            log.warning("Settings at %s are not an object, using defaults", self.path)
            return Settings()
        return Settings.from_dict(data)

    def save(self, settings: Settings) -> None:
        content = json.dumps(settings.to_dict(), indent=2, ensure_ascii=False)
        with file_lock(self.path):
            atomic_write(self.path, content + "\n")
        log.debug("Saved settings to %s", self.path)


def keyring_api_key() -> str:
    """Retrieve the API key from the system keyring, "" when unavailable."""
    try:
        import keyring

        return keyring.get_password(KEYRING_SERVICE, KEYRING_ENTRY) or ""
    except Exception:
        log.debug("Keyring lookup failed", exc_info=True)
        return ""


def store_keyring_api_key(api_key: str) -> None:
    """Store the API key in the system keyring."""
    import keyring

    keyring.set_password(KEYRING_SERVICE, KEYRING_ENTRY, api_key)


def resolve_api_key(settings: Settings) -> str:
    """Settings key first, then the system keyring."""
    return settings.api_key or keyring_api_key()
