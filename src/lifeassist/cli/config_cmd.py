"""CLI commands for assistant settings: ala config ..."""

from __future__ import annotations

from pathlib import Path

import click

from lifeassist.core.config import config_path, load_config, resolve_vault
from lifeassist.core.settings import (
    SUPPORTED_MODELS,
    SettingsStore,
    keyring_api_key,
    store_keyring_api_key,
)
from lifeassist.core.vault import Vault

_vault_option = click.option(
    "--vault",
    type=click.Path(path_type=Path),
    default=None,
    help="Override LA_VAULT path.",
)


@click.group("config")
def config_group() -> None:
    """Show or change assistant settings."""


@config_group.command("show")
@_vault_option
def config_show(vault: Path | None) -> None:
    """Show current settings (API key masked)."""
    vault_path = vault or resolve_vault()
    settings = SettingsStore(vault_path).load()
    config = load_config(config_path(vault_path))

    if settings.api_key:
        key = settings.masked_key()
    elif keyring_api_key():
        key = "(keyring)"
    else:
        key = "(not set)"

    click.echo(f"Vault:               {vault_path}")
    click.echo(f"API key:             {key}")
    click.echo(f"Model:               {settings.default_model}")
    click.echo(f"Prompt files folder: {settings.prompt_files_folder_path or '(all markdown files)'}")
    click.echo(f"Default prompt file: {settings.prompt_file_path or '(none)'}")
    click.echo(f"History entries:     {len(settings.chat_history)}")
    click.echo(f"Token limit:         {config['context']['max_tokens']}")


@config_group.command("set-key")
@click.argument("api_key", required=False)
@click.option(
    "--keyring",
    "use_keyring",
    is_flag=True,
    default=False,
    help="Store the key in the system keyring instead of data.json.",
)
@_vault_option
def config_set_key(api_key: str | None, use_keyring: bool, vault: Path | None) -> None:
    """Set the OpenAI API key (prompted when omitted)."""
    if not api_key:
        api_key = click.prompt("OpenAI API key", hide_input=True)

    if use_keyring:
        try:
            store_keyring_api_key(api_key)
        except Exception as e:
            raise click.ClickException(f"Could not store key in keyring: {e}") from e
        click.echo("API key stored in system keyring.")
        return

    store = SettingsStore(vault or resolve_vault())
    settings = store.load()
    settings.api_key = api_key
    store.save(settings)
    click.echo("API key saved.")


@config_group.command("set-model")
@click.argument("model", type=click.Choice(SUPPORTED_MODELS))
@_vault_option
def config_set_model(model: str, vault: Path | None) -> None:
    """Set the default chat model."""
    store = SettingsStore(vault or resolve_vault())
    settings = store.load()
    settings.default_model = model
    store.save(settings)
    click.echo(f"Default model set to: {model}")


@config_group.command("set-prompt-folder")
@click.argument("folder", required=False, default="")
@_vault_option
def config_set_prompt_folder(folder: str, vault: Path | None) -> None:
    """Source prompt files from FOLDER (omit to list all markdown files)."""
    vault_path = vault or resolve_vault()
    folder = folder.strip().strip("/")
    if folder and not Vault(vault_path).is_folder(folder):
        click.echo(f'Warning: folder "{folder}" does not exist in the vault.')

    store = SettingsStore(vault_path)
    settings = store.load()
    settings.prompt_files_folder_path = folder
    store.save(settings)
    click.echo(f"Prompt files will now be sourced from: {folder or 'All vault files'}")


@config_group.command("set-prompt-file")
@click.argument("path", required=False, default="")
@_vault_option
def config_set_prompt_file(path: str, vault: Path | None) -> None:
    """Set the prompt file loaded on startup (omit to clear)."""
    vault_path = vault or resolve_vault()
    if path and Vault(vault_path).get_note(path) is None:
        raise click.ClickException(f"Prompt file not found: {path}")

    store = SettingsStore(vault_path)
    settings = store.load()
    settings.prompt_file_path = path
    store.save(settings)
    if path:
        click.echo(f"Default prompt file set to: {path}")
    else:
        click.echo("Default prompt file cleared.")
