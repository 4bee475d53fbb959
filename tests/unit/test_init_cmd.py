"""Tests for lifeassist.cli.init_cmd (ala init)."""

from __future__ import annotations

from pathlib import Path

import yaml
from click.testing import CliRunner

from lifeassist.cli.main import cli
from lifeassist.core.settings import SettingsStore


class TestInitBasic:
    def test_init_creates_assistant_dir(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["init", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "Initialized" in result.output
        assert (tmp_path / ".assistant").is_dir()
        assert (tmp_path / ".assistant" / "data.json").exists()

    def test_init_creates_config_yaml(self, tmp_path: Path):
        CliRunner().invoke(cli, ["init", str(tmp_path)])

        config = yaml.safe_load(
            (tmp_path / ".assistant" / "config.yaml").read_text(encoding="utf-8")
        )
        assert config["context"]["max_tokens"] == 15000
        assert config["context"]["chars_per_token"] == 3.5
        assert "llm" in config
        assert "ui" in config

    def test_init_creates_gitignore(self, tmp_path: Path):
        CliRunner().invoke(cli, ["init", str(tmp_path)])

        content = (tmp_path / ".assistant" / ".gitignore").read_text(encoding="utf-8")
        assert "data.json" in content

    def test_init_already_initialized(self, tmp_path: Path):
        runner = CliRunner()
        assert runner.invoke(cli, ["init", str(tmp_path)]).exit_code == 0

        result = runner.invoke(cli, ["init", str(tmp_path)])
        assert result.exit_code == 0
        assert "already initialized" in result.output

    def test_init_keeps_history(self, tmp_path: Path):
        runner = CliRunner()
        runner.invoke(cli, ["init", str(tmp_path)])
        store = SettingsStore(tmp_path)
        settings = store.load()
        settings.api_key = "sk-keep"
        store.save(settings)

        runner.invoke(cli, ["init", str(tmp_path), "--interactive"], input="\n\n")
        assert store.load().api_key == "sk-keep"

    def test_init_missing_vault(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["init", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "does not exist" in result.output


class TestInitInteractive:
    def test_interactive_sets_key_and_model(self, tmp_path: Path):
        result = CliRunner().invoke(
            cli, ["init", str(tmp_path), "--interactive"], input="sk-typed\ngpt-4.1-nano\n",
        )

        assert result.exit_code == 0, result.output
        settings = SettingsStore(tmp_path).load()
        assert settings.api_key == "sk-typed"
        assert settings.default_model == "gpt-4.1-nano"
