"""CLI commands that call the model: ala ask, ala summarize."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from lifeassist.core.config import resolve_vault
from lifeassist.core.vault import VaultPathError
from lifeassist.llm.assistant import Assistant


def _open_assistant(vault: Path | None, note: str | None = None) -> Assistant:
    return Assistant(vault or resolve_vault()).open(active_note=note)


# --- ala ask [PROMPT] ---


@click.command("ask")
@click.argument("prompt", required=False)
@click.option("--folder", "-f", default=None, help="Use the notes in this vault folder as context.")
@click.option("--note", "-n", default=None, help="Active note used as context when no folder is given.")
@click.option("--prompt-file", "-p", default=None, help="Load the prompt from a note.")
@click.option(
    "--vault",
    type=click.Path(path_type=Path),
    default=None,
    help="Override LA_VAULT path.",
)
def ask_cmd(
    prompt: str | None,
    folder: str | None,
    note: str | None,
    prompt_file: str | None,
    vault: Path | None,
) -> None:
    """Ask the model, with a folder or the active note as context.

    PROMPT "-" reads the prompt from stdin. Without PROMPT the prompt file
    (or the default prompt file from settings) is used.
    """
    assistant = _open_assistant(vault, note)
    try:
        if prompt_file:
            if assistant.vault.get_note(prompt_file) is None:
                raise click.ClickException(f"Prompt file not found: {prompt_file}")
            assistant.select_prompt_file(prompt_file)

        if prompt == "-":
            prompt = sys.stdin.read()

        if folder:
            click.echo(f"Loading context from folder: {folder}...", err=True)
            try:
                snapshot = assistant.context.select_folder(
                    folder, pending_prompt=prompt if prompt is not None else assistant.prompt,
                )
            except VaultPathError as e:
                raise click.ClickException(str(e)) from e
            for notice in snapshot.notices:
                click.echo(notice, err=True)

        click.echo(assistant.context.describe(), err=True)
        click.echo("Thinking...", err=True)
        result = assistant.ask(prompt)
    finally:
        assistant.close()

    if result.error:
        raise click.ClickException(result.error)
    click.echo(result.answer)


# --- ala summarize [TEXT] ---


@click.command("summarize")
@click.argument("text", required=False)
@click.option(
    "--file",
    "file_path",
    default=None,
    help="Summarize a note (vault-relative path) instead of TEXT.",
)
@click.option(
    "--in-place",
    is_flag=True,
    default=False,
    help="Replace the note's content with the summary (requires --file).",
)
@click.option(
    "--vault",
    type=click.Path(path_type=Path),
    default=None,
    help="Override LA_VAULT path.",
)
def summarize_cmd(
    text: str | None,
    file_path: str | None,
    in_place: bool,
    vault: Path | None,
) -> None:
    """Summarize a selection: TEXT, a note, or stdin."""
    if in_place and not file_path:
        raise click.UsageError("--in-place requires --file.")

    assistant = _open_assistant(vault)
    try:
        note = None
        if file_path:
            note = assistant.vault.get_note(file_path)
            if note is None:
                raise click.ClickException(f"Note not found: {file_path}")
            text = assistant.vault.read_note(note)
        elif text is None or text == "-":
            text = "" if sys.stdin.isatty() else sys.stdin.read()

        click.echo("Summarizing...", err=True)
        result = assistant.summarize_selection(text)
        if result.error:
            raise click.ClickException(result.error)

        if in_place and note is not None:
            assistant.vault.write_note(note, result.answer)
            click.echo(f"Summary written to {note.path}", err=True)
        else:
            click.echo(result.answer)
    finally:
        assistant.close()
