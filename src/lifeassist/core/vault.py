"""Vault access: list folders and Markdown notes, read note content."""

from __future__ import annotations

import logging
from pathlib import Path

from lifeassist.core.fileutil import atomic_write
from lifeassist.core.models import Note

log = logging.getLogger(__name__)

NOTE_EXTENSION = ".md"

DEFAULT_EXCLUDE: list[str] = [".obsidian", ".assistant"]

# Folder entry that stands for the vault root itself
ROOT_FOLDER = "/"


class VaultPathError(ValueError):
    """Raised when a path points outside the vault."""


def _sort_key(value: str) -> tuple[str, str]:
    return (value.casefold(), value)


def _read_text_file(path: Path) -> str:
    """Read a text file with fallback encoding."""
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except (UnicodeDecodeError, ValueError):
            continue
    return ""


class Vault:
    """A directory of Markdown notes, addressed by "/"-separated relative paths."""

    def __init__(self, root: Path, exclude: list[str] | None = None) -> None:
        self.root = Path(root).expanduser().resolve()
        self._exclude = set(exclude if exclude is not None else DEFAULT_EXCLUDE)

    # --- Paths ---

    def resolve(self, rel_path: str) -> Path:
        """Turn a vault-relative path into an absolute one inside the vault."""
        rel = (rel_path or "").strip().strip("/")
        path = (self.root / rel).resolve()
        if path != self.root and self.root not in path.parents:
            raise VaultPathError(f"Path outside vault: {rel_path}")
        return path

    def relpath(self, path: Path) -> str:
        rel = Path(path).resolve().relative_to(self.root)
        return "" if rel == Path(".") else rel.as_posix()

    def _is_excluded(self, rel_parts: tuple[str, ...]) -> bool:
        return any(part in self._exclude or part.startswith(".") for part in rel_parts)

    # --- Listing ---

    def list_folders(self) -> list[str]:
        """All folders in the vault sorted by path, config and hidden folders excluded.

        The vault root comes first, as ROOT_FOLDER.
        """
        if not self.root.is_dir():
            return []
        folders: list[str] = []
        for path in self.root.rglob("*"):
            if not path.is_dir():
                continue
            rel = path.relative_to(self.root)
            if self._is_excluded(rel.parts):
                continue
            folders.append(rel.as_posix())
        folders.sort(key=_sort_key)
        return [ROOT_FOLDER] + folders

    def is_folder(self, rel_path: str) -> bool:
        """True for an existing, non-excluded folder."""
        try:
            path = self.resolve(rel_path)
        except VaultPathError:
            return False
        if not path.is_dir():
            return False
        return not self._is_excluded(path.relative_to(self.root).parts)

    def markdown_files(self, folder: str | None = None) -> list[Note]:
        """Markdown notes sorted by path.

        With a folder, only the notes directly inside it (no subfolders).
        Without one, every note in the vault outside excluded folders.
        """
        if folder is None:
            candidates = self.root.rglob(f"*{NOTE_EXTENSION}") if self.root.is_dir() else []
        else:
            base = self.resolve(folder)
            if not base.is_dir():
                return []
            candidates = base.iterdir()

        notes: list[Note] = []
        for path in candidates:
            if not path.is_file() or path.suffix.lower() != NOTE_EXTENSION:
                continue
            rel = path.relative_to(self.root)
            if self._is_excluded(rel.parts[:-1]):
                continue
            notes.append(self._note(rel))
        notes.sort(key=lambda n: _sort_key(n.path))
        return notes

    def get_note(self, rel_path: str) -> Note | None:
        """Return the note at a path, or None if it is not an existing .md file."""
        try:
            path = self.resolve(rel_path)
        except VaultPathError:
            return None
        if not path.is_file() or path.suffix.lower() != NOTE_EXTENSION:
            return None
        return self._note(path.relative_to(self.root))

    def read_note(self, note: Note) -> str:
        """Read a note's text. Unreadable notes read as empty."""
        path = self.resolve(note.path)
        try:
            return _read_text_file(path)
        except OSError:
            log.warning("Failed to read note: %s", path, exc_info=True)
            return ""

    def load(self, note: Note) -> Note:
        note.content = self.read_note(note)
        return note

    def write_note(self, note: Note, content: str) -> None:
        atomic_write(self.resolve(note.path), content, secure=False)
        note.content = content

    def prompt_files(self, prompt_folder: str = "") -> tuple[list[Note], str]:
        """Notes offered as prompt files, plus a notice when the folder is missing.

        A configured prompt folder limits the list to its direct children.
        A missing prompt folder falls back to every note in the vault.
        """
        if prompt_folder:
            if self.is_folder(prompt_folder):
                return self.markdown_files(prompt_folder), ""
            log.warning("Prompt folder not found: %s", prompt_folder)
            notice = f'Prompt folder "{prompt_folder}" not found. Listing all markdown files.'
            return self.markdown_files(), notice
        return self.markdown_files(), ""

    @staticmethod
    def _note(rel: Path) -> Note:
        parent = rel.parent.as_posix()
        return Note(
            path=rel.as_posix(),
            name=rel.name,
            folder="" if parent == "." else parent,
        )
