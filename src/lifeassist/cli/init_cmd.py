"""CLI command for preparing a vault: ala init."""

from __future__ import annotations

import logging
from pathlib import Path

import click
import yaml

from lifeassist.core.config import DEFAULTS, assistant_dir, config_path, resolve_vault
from lifeassist.core.fileutil import ensure_dir
from lifeassist.core.settings import SUPPORTED_MODELS, Settings, SettingsStore

log = logging.getLogger(__name__)

# data.json holds the API key and the conversation log
_GITIGNORE_CONTENT = """\
data.json
.data.json.lock
assistant.log
"""


@click.command("init")
@click.argument("path", required=False, type=click.Path(path_type=Path), default=None)
@click.option("--interactive", "-i", is_flag=True, help="Guided setup with prompts.")
def init_cmd(path: Path | None, interactive: bool) -> None:
    """Prepare a notes vault for the assistant.

    Creates .assistant/ with a default config.yaml and an empty settings file.
    PATH defaults to the current directory (or LA_VAULT if set).

    Use --interactive to enter the API key and model right away.
    """
    vault = (path or resolve_vault()).expanduser().resolve()
    if not vault.is_dir():
        raise click.ClickException(f"Vault folder does not exist: {vault}")

    cfg_path = config_path(vault)
    if cfg_path.exists() and not interactive:
        click.echo(f"Assistant already initialized in {vault}")
        click.echo("Use --interactive to reconfigure.")
        return

    ensure_dir(assistant_dir(vault))
    cfg_path.write_text(
        yaml.dump(_default_config(), default_flow_style=False, allow_unicode=True, sort_keys=False),
        encoding="utf-8",
    )

    gitignore_path = assistant_dir(vault) / ".gitignore"
    if not gitignore_path.exists():
        gitignore_path.write_text(_GITIGNORE_CONTENT, encoding="utf-8")

    store = SettingsStore(vault)
    settings = store.load() if store.path.exists() else Settings()
    if interactive:
        _interactive_setup(settings)
    store.save(settings)
    log.info("Initialized assistant in %s", vault)

    click.echo(f"Initialized assistant in {vault}")
    click.echo()
    click.echo("Files:")
    click.echo("  .assistant/config.yaml   token budget, API endpoint, web panel")
    click.echo("  .assistant/data.json     API key, model, prompt files, history")
    click.echo()
    click.echo("Next steps:")
    click.echo("  ala config set-key                 Store your OpenAI API key")
    click.echo("  ala ask \"question\" -f <folder>     Ask with a folder as context")
    click.echo("  ala ui                             Open the web panel")


def _default_config() -> dict:
    """Generate default config.yaml content."""
    return {
        "llm": DEFAULTS["llm"],
        "context": {
            "max_tokens": DEFAULTS["context"]["max_tokens"],
            "chars_per_token": DEFAULTS["context"]["chars_per_token"],
        },
        "ui": DEFAULTS["ui"],
        "logging": DEFAULTS["logging"],
    }


def _interactive_setup(settings: Settings) -> None:
    """Guided setup with prompts."""
    click.echo()
    click.echo("AI Life Assistant Setup")
    click.echo("=" * 40)
    click.echo()
    click.echo("OpenAI API access requires a separate API key")
    click.echo("(NOT included with a ChatGPT Plus subscription).")
    click.echo("Get your key at: https://platform.openai.com/api-keys")
    api_key = click.prompt(
        "  OpenAI API key (leave empty to skip)",
        default="",
        show_default=False,
        hide_input=True,
    )
    if api_key:
        settings.api_key = api_key

    settings.default_model = click.prompt(
        "  Default model",
        type=click.Choice(SUPPORTED_MODELS),
        default=settings.default_model,
    )
    click.echo()
