"""CLI commands for inspecting context sources: ala context, ala folders, ala prompts."""

from __future__ import annotations

from pathlib import Path

import click

from lifeassist.core.config import resolve_vault
from lifeassist.core.vault import VaultPathError
from lifeassist.llm.assistant import Assistant


@click.command("context")
@click.option("--folder", "-f", default=None, help="Vault folder to assemble context from.")
@click.option("--note", "-n", default=None, help="Active note used when no folder is given.")
@click.option("--prompt", default="", help="Pending prompt counted against the budget.")
@click.option("--show", is_flag=True, default=False, help="Print the assembled context text.")
@click.option(
    "--vault",
    type=click.Path(path_type=Path),
    default=None,
    help="Override LA_VAULT path.",
)
def context_cmd(
    folder: str | None,
    note: str | None,
    prompt: str,
    show: bool,
    vault: Path | None,
) -> None:
    """Preview the context that would be sent with a prompt."""
    assistant = Assistant(vault or resolve_vault()).open(active_note=note)
    if prompt:
        assistant.prompt = prompt

    if folder:
        try:
            snapshot = assistant.select_folder(folder)
        except VaultPathError as e:
            raise click.ClickException(str(e)) from e
    else:
        snapshot = assistant.context.snapshot

    for notice in snapshot.notices:
        click.echo(notice)

    click.echo(assistant.context.describe())
    if snapshot.skipped:
        click.echo(f"Skipped: {', '.join(snapshot.skipped)}")

    status = assistant.token_status()
    click.echo(status.describe())
    if status.exceeded:
        click.echo(
            f"Token limit exceeded! Current: ~{status.total} "
            f"(Max: {status.max_tokens}). Shorten prompt or context."
        )

    if show and snapshot.content:
        click.echo("")
        click.echo(snapshot.content)


@click.command("folders")
@click.option(
    "--vault",
    type=click.Path(path_type=Path),
    default=None,
    help="Override LA_VAULT path.",
)
def folders_cmd(vault: Path | None) -> None:
    """List folders that can be used as context."""
    assistant = Assistant(vault or resolve_vault())
    folders = assistant.list_folders()
    if not folders:
        click.echo("No folders in vault.")
        return
    for folder in folders:
        click.echo(folder)


@click.command("prompts")
@click.option("--show", "show_path", default=None, help="Print the content of one prompt file.")
@click.option(
    "--vault",
    type=click.Path(path_type=Path),
    default=None,
    help="Override LA_VAULT path.",
)
def prompts_cmd(show_path: str | None, vault: Path | None) -> None:
    """List prompt files (from the prompt folder, or the whole vault)."""
    assistant = Assistant(vault or resolve_vault()).open()

    if show_path:
        text = assistant.select_prompt_file(show_path)
        if not assistant.prompt_file:
            raise click.ClickException(f"Prompt file not found: {show_path}")
        click.echo(text)
        return

    notice = assistant.prompt_files_notice()
    if notice:
        click.echo(notice)

    notes = assistant.prompt_files()
    if not notes:
        click.echo("No prompt files found.")
        return

    default = assistant.settings.prompt_file_path
    for note in notes:
        marker = " (default)" if note.path == default else ""
        click.echo(f"{note.path}{marker}")
