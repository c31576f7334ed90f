"""
Command-line interface for pacjump.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click
from click.core import ParameterSource

from pacjump.config import load_config
from pacjump.__version__ import __version__
from pacjump.context import PacjumpContext
from pacjump.constants import CONFIG_ENV_VAR, EXIT_ERROR, EXIT_INTERRUPTED, EXIT_OK
from pacjump.exceptions import ConfigError, PacjumpError
from pacjump.utils.logger import get_logger, setup_logging
from pacjump.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar=CONFIG_ENV_VAR,
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored diagnostics.",
    envvar="PACJUMP_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="pacjump",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """Dump pacman packages information in JSON.

    \b
    Available commands:
      pacjump query                 Dump package info as JSON
      pacjump completions SHELL     Print a shell completion script

    \b
    Examples:
      pacjump query
      pacjump query --all --plain
      pacjump query --recurse texstudio --summary

    Use ``pacjump COMMAND --help`` for command-specific options.
    """
    # Respect NO_COLOR for the console and log formatter; only an explicit
    # --color overrides a NO_COLOR inherited from the environment
    if not color:
        os.environ["NO_COLOR"] = "1"
    elif ctx.get_parameter_source("color") is not ParameterSource.DEFAULT:
        os.environ.pop("NO_COLOR", None)
    color = not os.environ.get("NO_COLOR")
    reconfigure_console()

    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(exc.exit_code) from exc

    pacjump_ctx = PacjumpContext()
    pacjump_ctx.config_path = config or loaded_config.source_path
    pacjump_ctx.color = color
    pacjump_ctx.verbose = verbose
    pacjump_ctx.config = loaded_config
    ctx.obj = pacjump_ctx

    logger.debug("pacjump v%s", __version__)
    logger.debug("Config path: %s", pacjump_ctx.config_path)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from pacjump.commands.query import query  # noqa: E402
from pacjump.commands.completions import completions  # noqa: E402

cli.add_command(query)
cli.add_command(completions)


def main() -> int:
    """Main entry point for the pacjump CLI.

    Returns:
        Exit code:
            0   Success
            1   Application error
            2   Usage error (Click)
            3   Unknown package passed to --recurse
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return EXIT_OK

    except click.exceptions.Exit as exc:
        return exc.exit_code

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_ERROR

    except PacjumpError as exc:
        print_error(str(exc))
        logger.debug(
            "PacjumpError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return exc.exit_code

    except (KeyboardInterrupt, click.Abort):
        print_warning("Operation cancelled by user")
        return EXIT_INTERRUPTED

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
