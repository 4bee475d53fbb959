"""Core data models for LifeAssist."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


class ContextSource(str, Enum):
    NONE = "none"
    ACTIVE_NOTE = "active"
    FOLDER = "folder"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _as_int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass
class ConversationEntry:
    """One request/response exchange in the append-only log."""

    user_prompt: str
    ai_response: str
    timestamp: int = field(default_factory=_now_ms)  # epoch milliseconds

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "userPrompt": self.user_prompt,
            "aiResponse": self.ai_response,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ConversationEntry:
        return cls(
            user_prompt=str(data.get("userPrompt", "")),
            ai_response=str(data.get("aiResponse", "")),
            timestamp=_as_int(data.get("timestamp")),
        )


@dataclass
class Note:
    """A Markdown note in the vault."""

    path: str  # vault-relative, "/"-separated
    name: str  # file name including extension
    folder: str = ""  # vault-relative parent folder, "" for the root
    content: str = ""


@dataclass
class ContextSnapshot:
    """The assembled context buffer and where it came from."""

    content: str = ""
    source: str = ContextSource.NONE
    folder: str = ""
    files: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    tokens: int = 0
    notices: list[str] = field(default_factory=list)


@dataclass
class TokenStatus:
    """Estimated token usage of the pending request."""

    context_tokens: int
    prompt_tokens: int
    max_tokens: int

    @property
    def total(self) -> int:
        return self.context_tokens + self.prompt_tokens

    @property
    def exceeded(self) -> bool:
        return self.total > self.max_tokens

    def describe(self) -> str:
        return (
            f"Context: ~{self.context_tokens} tokens. "
            f"Prompt: ~{self.prompt_tokens} tokens. "
            f"Total: ~{self.total} / {self.max_tokens} tokens."
        )


@dataclass
class AskResult:
    """Result of sending a prompt (or a selection) to the model."""

    prompt: str
    answer: str = ""
    error: str = ""
    entry: ConversationEntry | None = None
