"""Query command implementation for pacjump.

Dumps pacman package information as a single JSON array on standard
output. The command orchestrates the core components:

1. **AlpmDatabase** opens the local and sync databases once.
2. **ReportBuilder** collects the selected names (listing or
   :class:`ClosureResolver`) and merges local and sync records.
3. **Presentation** projects the records to full or summary form.

Nothing is written to standard output until the whole report is built,
so a failing run never leaves partial JSON behind.

Typical usage::

    # Explicitly installed packages, enriched from the sync databases
    $ pacjump query

    # Every installed package, local information only
    $ pacjump query --all --plain

    # Dependency closure, names and versions only
    $ pacjump query --recurse texstudio --optional --summary
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from pacjump.config import PacjumpConfig
from pacjump.context import PacjumpContext, pass_context
from pacjump.core import (
    AllInstalled,
    ClosureOf,
    ExplicitlyInstalled,
    Mode,
    PackageDatabase,
    ReportBuilder,
    ReverseDepsIndex,
    to_json,
)
from pacjump.core.alpm_db import AlpmDatabase
from pacjump.exceptions import PacjumpError
from pacjump.utils import get_logger, print_error

logger = get_logger("commands.query")


@click.command()
@click.option(
    "--sync",
    is_flag=True,
    help="List packages from the sync databases; by default only the "
    "local database of installed packages is listed.",
)
@click.option(
    "--all",
    "all_",
    is_flag=True,
    help="Include packages not explicitly installed.",
)
@click.option(
    "--plain",
    is_flag=True,
    help="Do not enrich local package info with sync database info.",
)
@click.option(
    "--recurse",
    metavar="PACKAGE",
    help="Dump the dependency closure of PACKAGE; implies --all.",
)
@click.option(
    "--optional",
    is_flag=True,
    help="Follow optional dependencies as well (requires --recurse).",
)
@click.option(
    "--summary",
    is_flag=True,
    help="Only print package names and versions.",
)
@click.option(
    "--indent",
    type=click.IntRange(min=0),
    default=None,
    help="Pretty-print the JSON with this indentation.",
)
@pass_context
def query(
    ctx: PacjumpContext,
    sync: bool,
    all_: bool,
    plain: bool,
    recurse: Optional[str],
    optional: bool,
    summary: bool,
    indent: Optional[int],
) -> None:
    """Dump package information as JSON.

    By default the explicitly installed packages are listed, and each local
    record is enriched field by field from the sync databases.

    Exits:
        0 on success (an empty result prints ``[]``), 3 if the --recurse
        package exists in no database, 1 on any other error.
    """
    if optional and recurse is None:
        raise click.UsageError("--optional requires --recurse")

    config = ctx.config
    mode = select_mode(
        sync=sync,
        all_=all_,
        recurse=recurse,
        include_optional=optional or config.include_optional,
    )
    enrich = config.enrich and not plain

    try:
        database = open_database(config)
        document = run_query(
            database,
            mode,
            enrich=enrich,
            summary=summary,
            indent=indent,
        )
    except PacjumpError as exc:
        print_error(str(exc))
        logger.debug("Query failed: %r", exc)
        sys.exit(exc.exit_code)

    click.echo(document)


def select_mode(
    *,
    sync: bool,
    all_: bool,
    recurse: Optional[str],
    include_optional: bool,
) -> Mode:
    """Translate command line flags into a report mode."""
    if recurse is not None:
        return ClosureOf(recurse, include_optional=include_optional)
    if all_:
        return AllInstalled(sync=sync)
    return ExplicitlyInstalled(sync=sync)


def open_database(config: PacjumpConfig) -> PackageDatabase:
    """Open the pacman databases described by ``config``."""
    return AlpmDatabase.open(
        root_dir=config.root_dir,
        db_path=config.db_path,
        repositories=config.repositories,
    )


def run_query(
    database: PackageDatabase,
    mode: Mode,
    *,
    enrich: bool = True,
    summary: bool = False,
    indent: Optional[int] = None,
) -> str:
    """Build the report for ``mode`` and return it as a JSON document.

    Reverse dependencies are only indexed for full output, since the
    summary projection drops them anyway.
    """
    reverse_deps = None if summary else ReverseDepsIndex.from_database(database)
    builder = ReportBuilder(database, reverse_deps=reverse_deps)
    records = builder.build(mode, enrich=enrich)
    return to_json(records, summary=summary, indent=indent)
