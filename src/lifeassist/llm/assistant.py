"""Assistant session: context selection, prompt files, ask/summarize, history."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from lifeassist.core.config import load_vault_config
from lifeassist.core.context import ContextAssembler
from lifeassist.core.models import (
    AskResult,
    ContextSnapshot,
    ConversationEntry,
    Note,
    TokenStatus,
)
from lifeassist.core.settings import Settings, SettingsStore, resolve_api_key
from lifeassist.core.tokens import exceeds_limit
from lifeassist.core.vault import Vault
from lifeassist.llm.openai_client import AssistantError, ChatCompletionClient

log = logging.getLogger(__name__)

PANEL_SYSTEM_PROMPT = "You are a helpful AI assistant. Please format your response in Markdown."

SUMMARY_SYSTEM_PROMPT = "You are a helpful assistant that summarizes text concisely."
SUMMARY_USER_PROMPT = "Please summarize the following text:"


class Assistant:
    """One assistant session over a vault.

    Lifecycle: open() loads settings, preloads the default prompt file and
    syncs with the active note; close() persists settings. At most one
    request is in flight at a time.
    """

    def __init__(
        self,
        vault_path: Path,
        config: dict | None = None,
        client: ChatCompletionClient | None = None,
    ) -> None:
        self.config = config if config is not None else load_vault_config(vault_path)
        self.vault = Vault(vault_path, exclude=self.config.get("vault", {}).get("exclude"))
        self.store = SettingsStore(self.vault.root)
        self.settings = Settings()
        self.context = ContextAssembler.from_config(self.vault, self.config)
        self.prompt = ""
        self.prompt_file = ""
        self._client = client
        self._busy = threading.Lock()
        self._opened = False

    # --- Lifecycle ---

    def open(self, active_note: str | None = None) -> Assistant:
        """Load settings, the default prompt file and the active note's context."""
        self.settings = self.store.load()
        self._opened = True

        default_prompt = self.settings.prompt_file_path
        if default_prompt:
            if any(n.path == default_prompt for n in self.prompt_files()):
                self.select_prompt_file(default_prompt)
            else:
                log.info("Default prompt file not available: %s", default_prompt)

        self.context.set_active_note(active_note)
        return self

    def close(self) -> None:
        if self._opened:
            self.save_settings()
            self._opened = False

    def __enter__(self) -> Assistant:
        if not self._opened:
            self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def save_settings(self) -> None:
        self.store.save(self.settings)

    # --- Client ---

    @property
    def client(self) -> ChatCompletionClient:
        """Client built from the current settings unless one was injected."""
        if self._client is not None:
            return self._client
        return ChatCompletionClient(
            api_key=resolve_api_key(self.settings),
            model=self.settings.default_model,
            config=self.config.get("llm", {}),
        )

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    # --- Context ---

    def list_folders(self) -> list[str]:
        return self.vault.list_folders()

    def select_folder(self, folder: str) -> ContextSnapshot:
        """Replace the context with the given folder ("" = active note)."""
        return self.context.select_folder(folder, pending_prompt=self.prompt)

    def set_active_note(self, path: str | None) -> ContextSnapshot:
        return self.context.set_active_note(path)

    def token_status(self, prompt: str | None = None) -> TokenStatus:
        return self.context.token_status(self.prompt if prompt is None else prompt)

    # --- Prompt files ---

    def prompt_files(self) -> list[Note]:
        notes, _ = self.vault.prompt_files(self.settings.prompt_files_folder_path)
        return notes

    def prompt_files_notice(self) -> str:
        _, notice = self.vault.prompt_files(self.settings.prompt_files_folder_path)
        return notice

    def select_prompt_file(self, path: str) -> str:
        """Load a prompt file's content as the pending prompt ("" clears it)."""
        if not path:
            self.prompt_file = ""
            self.prompt = ""
            return self.prompt
        note = self.vault.get_note(path)
        if note is None:
            log.warning("Prompt file not found: %s", path)
            return self.prompt
        self.prompt_file = note.path
        self.prompt = self.vault.read_note(note)
        return self.prompt

    # --- Requests ---

    def ask(self, prompt: str | None = None) -> AskResult:
        """Send a prompt with the current context and log the exchange.

        Empty prompts, over-budget requests and a missing API key are
        rejected before any network call.
        """
        text = self.prompt if prompt is None else prompt
        result = AskResult(prompt=text)

        if not text.strip():
            result.error = "Please enter a prompt."
            return result

        context = self.context.content
        if exceeds_limit(
            context, text,
            max_tokens=self.context.max_tokens,
            chars_per_token=self.context.chars_per_token,
        ):
            status = self.token_status(text)
            result.error = (
                "Combined context and prompt exceed token limit. "
                "Please shorten or select a smaller folder. "
                f"Current: ~{status.total} (Max: {status.max_tokens})."
            )
            return result

        if not self._busy.acquire(blocking=False):
            result.error = "A request is already in progress."
            return result
        try:
            answer = self.client.complete(PANEL_SYSTEM_PROMPT, text, context)
            entry = ConversationEntry(user_prompt=text, ai_response=answer)
            self.settings.chat_history.append(entry)
            self.save_settings()
        except AssistantError as e:
            log.warning("Ask failed: %s", e)
            result.error = str(e)
            return result
        finally:
            self._busy.release()

        result.answer = answer
        result.entry = entry
        if prompt is None:
            self.prompt = ""
        return result

    def summarize_selection(self, selection: str) -> AskResult:
        """Summarize a piece of selected text. Not logged to the history."""
        result = AskResult(prompt=SUMMARY_USER_PROMPT)
        if not selection:
            result.error = "No text selected."
            return result

        if not self._busy.acquire(blocking=False):
            result.error = "A request is already in progress."
            return result
        try:
            result.answer = self.client.complete(
                SUMMARY_SYSTEM_PROMPT, SUMMARY_USER_PROMPT, selection,
            )
        except AssistantError as e:
            log.warning("Summarize failed: %s", e)
            result.error = str(e)
        finally:
            self._busy.release()
        return result

    @property
    def history(self) -> list[ConversationEntry]:
        return self.settings.chat_history
