"""Tests for lifeassist.core.vault."""

from pathlib import Path

import pytest

from lifeassist.core.vault import Vault, VaultPathError, _read_text_file


def _make_vault(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    (root / "Journal" / "2025").mkdir(parents=True)
    (root / "Prompts").mkdir()
    (root / ".obsidian" / "plugins").mkdir(parents=True)
    (root / ".assistant").mkdir()
    (root / "Journal" / "b.md").write_text("second", encoding="utf-8")
    (root / "Journal" / "A.md").write_text("first", encoding="utf-8")
    (root / "Journal" / "image.png").write_bytes(b"\x89PNG")
    (root / "Journal" / "2025" / "deep.md").write_text("nested", encoding="utf-8")
    (root / "Prompts" / "summarize.md").write_text("Summarize this.", encoding="utf-8")
    (root / "root-note.md").write_text("at the root", encoding="utf-8")
    (root / ".obsidian" / "workspace.md").write_text("hidden", encoding="utf-8")
    return root


class TestListFolders:
    def test_sorted_and_excludes_config(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        assert vault.list_folders() == ["/", "Journal", "Journal/2025", "Prompts"]

    def test_missing_root(self, tmp_path: Path):
        assert Vault(tmp_path / "nope").list_folders() == []


class TestMarkdownFiles:
    def test_folder_direct_children_only(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        notes = vault.markdown_files("Journal")
        assert [n.name for n in notes] == ["A.md", "b.md"]
        assert notes[0].path == "Journal/A.md"
        assert notes[0].folder == "Journal"

    def test_all_notes_skip_excluded(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        paths = [n.path for n in vault.markdown_files()]
        assert paths == [
            "Journal/2025/deep.md",
            "Journal/A.md",
            "Journal/b.md",
            "Prompts/summarize.md",
            "root-note.md",
        ]

    def test_missing_folder(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        assert vault.markdown_files("Nope") == []


class TestNotes:
    def test_get_note(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        note = vault.get_note("Prompts/summarize.md")
        assert note is not None
        assert note.name == "summarize.md"
        assert vault.read_note(note) == "Summarize this."

    def test_get_note_rejects_non_markdown(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        assert vault.get_note("Journal/image.png") is None
        assert vault.get_note("Journal") is None
        assert vault.get_note("missing.md") is None

    def test_get_note_outside_vault(self, tmp_path: Path):
        root = _make_vault(tmp_path)
        (tmp_path / "secret.md").write_text("nope", encoding="utf-8")
        assert Vault(root).get_note("../secret.md") is None

    def test_resolve_outside_vault_raises(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        with pytest.raises(VaultPathError):
            vault.resolve("../../etc")

    def test_write_note(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        note = vault.get_note("root-note.md")
        vault.write_note(note, "rewritten")
        assert (vault.root / "root-note.md").read_text(encoding="utf-8") == "rewritten"
        assert note.content == "rewritten"

    def test_is_folder(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        assert vault.is_folder("Journal") is True
        assert vault.is_folder("Journal/2025") is True
        assert vault.is_folder(".obsidian") is False
        assert vault.is_folder("root-note.md") is False

    def test_root_folder(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        assert vault.is_folder("/") is True
        assert [n.path for n in vault.markdown_files("/")] == ["root-note.md"]


class TestPromptFiles:
    def test_prompt_folder(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        notes, notice = vault.prompt_files("Prompts")
        assert [n.path for n in notes] == ["Prompts/summarize.md"]
        assert notice == ""

    def test_missing_prompt_folder_falls_back(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        notes, notice = vault.prompt_files("Gone")
        assert len(notes) == 5
        assert 'Prompt folder "Gone" not found' in notice

    def test_no_prompt_folder_lists_all(self, tmp_path: Path):
        vault = Vault(_make_vault(tmp_path))
        notes, notice = vault.prompt_files("")
        assert len(notes) == 5
        assert notice == ""


class TestReadTextFile:
    def test_latin1_fallback(self, tmp_path: Path):
        f = tmp_path / "latin.md"
        f.write_bytes("caf\xe9".encode("latin-1"))
        assert "caf" in _read_text_file(f)
