"""CLI entry point for LifeAssist (ala command)."""

import click

from lifeassist import __version__
from lifeassist.cli.ask_cmd import ask_cmd, summarize_cmd
from lifeassist.cli.config_cmd import config_group
from lifeassist.cli.context_cmd import context_cmd, folders_cmd, prompts_cmd
from lifeassist.cli.history_cmd import history_cmd
from lifeassist.cli.init_cmd import init_cmd
from lifeassist.cli.ui_cmd import ui_cmd
from lifeassist.core.config import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="lifeassist")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output to stderr.")
def cli(verbose: bool) -> None:
    """AI Life Assistant: ask a chat model about the notes in your vault."""
    if verbose:
        configure_logging("debug")


cli.add_command(init_cmd)
cli.add_command(ask_cmd)
cli.add_command(summarize_cmd)
cli.add_command(context_cmd)
cli.add_command(folders_cmd)
cli.add_command(prompts_cmd)
cli.add_command(history_cmd)
cli.add_command(config_group)
cli.add_command(ui_cmd)


if __name__ == "__main__":
    cli()
