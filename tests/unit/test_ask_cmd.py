"""Tests for lifeassist.cli.ask_cmd (ala ask, ala summarize)."""

from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from lifeassist.cli.main import cli
from lifeassist.core.settings import Settings, SettingsStore


def _setup_vault(tmp_path: Path) -> Path:
    vault = tmp_path / "vault"
    (vault / "Journal").mkdir(parents=True)
    (vault / "Prompts").mkdir()
    (vault / "Journal" / "mon.md").write_text("Ran 5k.", encoding="utf-8")
    (vault / "Journal" / "tue.md").write_text("Rested.", encoding="utf-8")
    (vault / "Prompts" / "weekly.md").write_text("Summarize my week.", encoding="utf-8")
    (vault / "long.md").write_text("A long note " * 20, encoding="utf-8")
    SettingsStore(vault).save(Settings(api_key="sk-test"))
    return vault


class TestAskCmd:
    def test_ask_with_folder(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        runner = CliRunner()
        with patch("lifeassist.llm.assistant.ChatCompletionClient") as mock_cls:
            mock_cls.return_value.complete.return_value = "You ran once and rested once."
            result = runner.invoke(
                cli, ["ask", "How was my week?", "--folder", "Journal", "--vault", str(vault)],
            )

        assert result.exit_code == 0, result.output
        assert "You ran once and rested once." in result.output
        assert "Context Source: mon.md, tue.md" in result.output
        _system, prompt, context = mock_cls.return_value.complete.call_args.args
        assert prompt == "How was my week?"
        assert "Ran 5k." in context and "Rested." in context

        history = SettingsStore(vault).load().chat_history
        assert history[-1].user_prompt == "How was my week?"

    def test_ask_with_vault_root(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        runner = CliRunner()
        with patch("lifeassist.llm.assistant.ChatCompletionClient") as mock_cls:
            mock_cls.return_value.complete.return_value = "ok"
            result = runner.invoke(
                cli, ["ask", "What is here?", "--folder", "/", "--vault", str(vault)],
            )

        assert result.exit_code == 0, result.output
        assert "Context loaded from vault root" in result.output
        assert "Context Source: long.md" in result.output
        context = mock_cls.return_value.complete.call_args.args[2]
        assert context.startswith("A long note")
        assert "Ran 5k." not in context

    def test_ask_with_note(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        runner = CliRunner()
        with patch("lifeassist.llm.assistant.ChatCompletionClient") as mock_cls:
            mock_cls.return_value.complete.return_value = "ok"
            result = runner.invoke(
                cli, ["ask", "Shorten this", "--note", "Journal/mon.md", "--vault", str(vault)],
            )

        assert result.exit_code == 0, result.output
        assert "Context: mon.md (active)" in result.output
        assert mock_cls.return_value.complete.call_args.args[2] == "Ran 5k."

    def test_ask_prompt_file(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        runner = CliRunner()
        with patch("lifeassist.llm.assistant.ChatCompletionClient") as mock_cls:
            mock_cls.return_value.complete.return_value = "ok"
            result = runner.invoke(
                cli, ["ask", "-p", "Prompts/weekly.md", "-f", "Journal", "--vault", str(vault)],
            )

        assert result.exit_code == 0, result.output
        assert mock_cls.return_value.complete.call_args.args[1] == "Summarize my week."

    def test_ask_from_stdin(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        runner = CliRunner()
        with patch("lifeassist.llm.assistant.ChatCompletionClient") as mock_cls:
            mock_cls.return_value.complete.return_value = "ok"
            result = runner.invoke(cli, ["ask", "-", "--vault", str(vault)], input="Piped question")

        assert result.exit_code == 0, result.output
        assert mock_cls.return_value.complete.call_args.args[1] == "Piped question"

    def test_ask_empty_prompt(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        result = CliRunner().invoke(cli, ["ask", "--vault", str(vault)])
        assert result.exit_code == 1
        assert "Please enter a prompt." in result.output

    def test_ask_unknown_folder(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        result = CliRunner().invoke(cli, ["ask", "hi", "-f", "Nope", "--vault", str(vault)])
        assert result.exit_code == 1
        assert "Folder not found: Nope" in result.output

    def test_ask_unknown_prompt_file(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        result = CliRunner().invoke(cli, ["ask", "-p", "Prompts/x.md", "--vault", str(vault)])
        assert result.exit_code == 1
        assert "Prompt file not found" in result.output

    def test_ask_over_limit(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        cfg = vault / ".assistant" / "config.yaml"
        cfg.write_text("context:\n  max_tokens: 20\n", encoding="utf-8")
        with patch("lifeassist.llm.assistant.ChatCompletionClient") as mock_cls:
            result = CliRunner().invoke(
                cli, ["ask", "Explain", "--note", "long.md", "--vault", str(vault)],
            )

        assert result.exit_code == 1
        assert "exceed token limit" in result.output
        mock_cls.return_value.complete.assert_not_called()

    def test_ask_without_api_key(self, tmp_path: Path):
        vault = tmp_path / "empty"
        vault.mkdir()
        with patch("lifeassist.core.settings.keyring_api_key", return_value=""):
            result = CliRunner().invoke(cli, ["ask", "Hello", "--vault", str(vault)])

        assert result.exit_code == 1
        assert "OpenAI API Key not set" in result.output


class TestSummarizeCmd:
    def test_summarize_text(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        with patch("lifeassist.llm.assistant.ChatCompletionClient") as mock_cls:
            mock_cls.return_value.complete.return_value = "Short."
            result = CliRunner().invoke(
                cli, ["summarize", "Some very long text", "--vault", str(vault)],
            )

        assert result.exit_code == 0, result.output
        assert "Short." in result.output
        assert mock_cls.return_value.complete.call_args.args[2] == "Some very long text"
        assert SettingsStore(vault).load().chat_history == []

    def test_summarize_file_in_place(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        with patch("lifeassist.llm.assistant.ChatCompletionClient") as mock_cls:
            mock_cls.return_value.complete.return_value = "Long note, summarized."
            result = CliRunner().invoke(
                cli, ["summarize", "--file", "long.md", "--in-place", "--vault", str(vault)],
            )

        assert result.exit_code == 0, result.output
        assert (vault / "long.md").read_text(encoding="utf-8") == "Long note, summarized."

    def test_in_place_requires_file(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        result = CliRunner().invoke(cli, ["summarize", "text", "--in-place", "--vault", str(vault)])
        assert result.exit_code == 2
        assert "--in-place requires --file" in result.output

    def test_summarize_nothing_selected(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        result = CliRunner().invoke(cli, ["summarize", "--vault", str(vault)], input="")
        assert result.exit_code == 1
        assert "No text selected." in result.output

    def test_summarize_missing_note(self, tmp_path: Path):
        vault = _setup_vault(tmp_path)
        result = CliRunner().invoke(cli, ["summarize", "--file", "gone.md", "--vault", str(vault)])
        assert result.exit_code == 1
        assert "Note not found: gone.md" in result.output
