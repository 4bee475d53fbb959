"""Context assembly: fill a token budget with notes from a folder or the active note."""

from __future__ import annotations

import logging

from lifeassist.core.models import ContextSnapshot, ContextSource, Note, TokenStatus
from lifeassist.core.tokens import (
    CHARS_PER_TOKEN,
    MAX_CONTEXT_TOKENS,
    estimate_tokens,
    token_status,
)
from lifeassist.core.vault import ROOT_FOLDER, Vault, VaultPathError

log = logging.getLogger(__name__)

SEPARATOR = "\n\n---\n\n"


def _folder_label(folder: str) -> str:
    return "vault root" if folder in ("", ROOT_FOLDER) else folder


def assemble_folder(
    notes: list[Note],
    pending_prompt: str = "",
    *,
    folder: str = "",
    max_tokens: int = MAX_CONTEXT_TOKENS,
    chars_per_token: float = CHARS_PER_TOKEN,
    separator: str = SEPARATOR,
) -> ContextSnapshot:
    """Concatenate notes (sorted by name) until the next one would break the budget.

    Each included note is followed by the separator. The running estimate
    counts every note and separator, so the estimate of the result never
    exceeds max_tokens minus the pending prompt's estimate. The first note
    that does not fit ends assembly; it and all later notes are dropped.

    Args:
        notes: Candidate notes with content loaded.
        pending_prompt: Prompt text the context will be sent with.
        folder: Folder the notes came from, for notices.
        max_tokens: Token ceiling for context plus prompt.
        chars_per_token: Characters per estimated token.
        separator: Text appended after each note.

    Returns:
        ContextSnapshot with content, included and skipped file names, notices.
    """
    ordered = sorted(notes, key=lambda n: (n.name.casefold(), n.name))
    prompt_tokens = estimate_tokens(pending_prompt, chars_per_token)
    separator_tokens = estimate_tokens(separator, chars_per_token)

    parts: list[str] = []
    files: list[str] = []
    skipped: list[str] = []
    notices: list[str] = []
    current_tokens = 0

    for i, note in enumerate(ordered):
        note_tokens = estimate_tokens(note.content, chars_per_token)
        if current_tokens + note_tokens + separator_tokens + prompt_tokens > max_tokens:
            skipped = [n.name for n in ordered[i:]]
            last_added = files[-1] if files else "none"
            notices.append(
                "Stopped adding files to context to avoid exceeding token limit. "
                f"Last file added: {last_added}. Current file skipped: {note.name}"
            )
            log.info("Context budget reached in %r, skipped %d file(s)", folder, len(skipped))
            break
        parts.append(note.content + separator)
        files.append(note.name)
        current_tokens += note_tokens + separator_tokens

    content = "".join(parts)
    tokens = estimate_tokens(content, chars_per_token)
    if content:
        notices.append(
            f"Context loaded from {_folder_label(folder)}. "
            f"Estimated context tokens: ~{tokens}"
        )

    return ContextSnapshot(
        content=content,
        source=ContextSource.FOLDER,
        folder=folder,
        files=files,
        skipped=skipped,
        tokens=tokens,
        notices=notices,
    )


class ContextAssembler:
    """Holds the current context buffer for one assistant session.

    The buffer comes from the selected folder, or from the active note when
    no folder is selected. Every selection change rebuilds the buffer from
    scratch.
    """

    def __init__(
        self,
        vault: Vault,
        *,
        max_tokens: int = MAX_CONTEXT_TOKENS,
        chars_per_token: float = CHARS_PER_TOKEN,
        separator: str = SEPARATOR,
    ) -> None:
        self.vault = vault
        self.max_tokens = max_tokens
        self.chars_per_token = chars_per_token
        self.separator = separator
        self.folder = ""
        self.active_note: Note | None = None
        self._snapshot = ContextSnapshot()

    @classmethod
    def from_config(cls, vault: Vault, config: dict) -> ContextAssembler:
        ctx = config.get("context", {})
        return cls(
            vault,
            max_tokens=int(ctx.get("max_tokens", MAX_CONTEXT_TOKENS)),
            chars_per_token=float(ctx.get("chars_per_token", CHARS_PER_TOKEN)),
            separator=ctx.get("separator", SEPARATOR),
        )

    @property
    def snapshot(self) -> ContextSnapshot:
        return self._snapshot

    @property
    def content(self) -> str:
        return self._snapshot.content

    def select_folder(self, folder: str, pending_prompt: str = "") -> ContextSnapshot:
        """Select a context folder.

        ROOT_FOLDER selects the notes at the top of the vault. "" clears the
        selection and falls back to the active note.

        Raises:
            VaultPathError: If the folder does not exist in the vault.
        """
        folder = (folder or "").strip()
        if folder != ROOT_FOLDER:
            folder = folder.strip("/")
        if folder and not self.vault.is_folder(folder):
            raise VaultPathError(f"Folder not found: {folder}")

        self.folder = folder
        if folder:
            log.info("Loading context from folder: %s", folder)
            self._snapshot = self._from_folder(pending_prompt)
        else:
            self._snapshot = self._from_active_note()
        return self._snapshot

    def set_active_note(self, path: str | None) -> ContextSnapshot:
        """Change the active note. Only affects the buffer when no folder is selected."""
        note = self.vault.get_note(path) if path else None
        if path and note is None:
            log.debug("Active note is not a Markdown file: %s", path)
        self.active_note = note
        if not self.folder:
            self._snapshot = self._from_active_note()
        return self._snapshot

    def refresh(self, pending_prompt: str = "") -> ContextSnapshot:
        """Rebuild the buffer for the current selection."""
        if self.folder:
            self._snapshot = self._from_folder(pending_prompt)
        else:
            self._snapshot = self._from_active_note()
        return self._snapshot

    def token_status(self, prompt: str) -> TokenStatus:
        return token_status(
            self.content, prompt,
            max_tokens=self.max_tokens,
            chars_per_token=self.chars_per_token,
        )

    def describe(self) -> str:
        """One-line description of where the context comes from."""
        snap = self._snapshot
        if snap.source == ContextSource.ACTIVE_NOTE and snap.files:
            return f"Context: {snap.files[0]} (active)"
        if snap.source == ContextSource.FOLDER:
            if snap.files:
                return "Context Source: " + ", ".join(snap.files)
            return f"No context files loaded from folder: {snap.folder}"
        return "No context: Select a folder or open an MD file."

    # --- Internals ---

    def _from_folder(self, pending_prompt: str) -> ContextSnapshot:
        notes = [self.vault.load(n) for n in self.vault.markdown_files(self.folder)]
        return assemble_folder(
            notes,
            pending_prompt,
            folder=self.folder,
            max_tokens=self.max_tokens,
            chars_per_token=self.chars_per_token,
            separator=self.separator,
        )

    def _from_active_note(self) -> ContextSnapshot:
        note = self.active_note
        if note is None:
            return ContextSnapshot()
        content = self.vault.read_note(note)
        return ContextSnapshot(
            content=content,
            source=ContextSource.ACTIVE_NOTE,
            files=[note.name],
            tokens=estimate_tokens(content, self.chars_per_token),
        )
