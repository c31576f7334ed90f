"""Shell completion script generation for pacjump.

Prints the completion script of the requested shell, to be sourced by the
shell's startup files::

    $ pacjump completions bash > ~/.local/share/bash-completion/completions/pacjump
    $ pacjump completions fish > ~/.config/fish/completions/pacjump.fish
"""

from __future__ import annotations

import click
from click.shell_completion import get_completion_class

from pacjump.utils import get_logger

logger = get_logger("commands.completions")

#: Name of the installed console script.
PROG_NAME = "pacjump"

#: Environment variable click reads to trigger completion.
COMPLETE_VAR = "_PACJUMP_COMPLETE"


@click.command()
@click.argument(
    "shell",
    type=click.Choice(["bash", "zsh", "fish"], case_sensitive=False),
)
@click.pass_context
def completions(ctx: click.Context, shell: str) -> None:
    """Print the completion script for SHELL."""
    root = ctx.find_root()
    completion_class = get_completion_class(shell.lower())
    if completion_class is None:
        raise click.UsageError(f"unsupported shell: {shell}")

    completion = completion_class(root.command, {}, PROG_NAME, COMPLETE_VAR)
    logger.debug("Generating %s completion for %s", shell, PROG_NAME)
    click.echo(completion.source())
