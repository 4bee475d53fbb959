"""CLI command for the conversation log: ala history."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import click

from lifeassist.core.config import resolve_vault
from lifeassist.core.settings import SettingsStore


def _format_ts(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


@click.command("history")
@click.option("--limit", "-l", default=0, type=int, help="Show only the last N exchanges.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output raw JSON entries.")
@click.option(
    "--vault",
    type=click.Path(path_type=Path),
    default=None,
    help="Override LA_VAULT path.",
)
def history_cmd(limit: int, as_json: bool, vault: Path | None) -> None:
    """Show past prompts and responses, oldest first."""
    settings = SettingsStore(vault or resolve_vault()).load()
    entries = settings.chat_history
    if limit > 0:
        entries = entries[-limit:]

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False))
        return

    if not entries:
        click.echo("No conversation history yet.")
        return

    for entry in entries:
        click.echo(f"--- {_format_ts(entry.timestamp)} ---")
        click.echo(f"You: {entry.user_prompt}")
        click.echo(f"AI: {entry.ai_response}")
        click.echo("")
