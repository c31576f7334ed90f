"""Access to the effective pacman configuration.

``pacman.conf`` is not parsed here; the ``pacman-conf`` helper shipped
with pacman already resolves includes and defaults, so it is queried
instead::

    $ pacman-conf RootDir
    /
    $ pacman-conf --repo=extra SigLevel
    PackageRequired
    PackageTrustedOnly
    DatabaseOptional
    DatabaseTrustedOnly

Signature levels come back in the fine-grained form shown above, one
directive per line, and are folded into a :class:`SigLevel` bit set with
the same semantics as pacman's own ``process_siglevel``.
"""

from __future__ import annotations

import os
import subprocess
from enum import IntFlag
from typing import Dict, List, Optional, Sequence

from pacjump.constants import (
    DEFAULT_DB_PATH,
    DEFAULT_ROOT_DIR,
    PACMAN_CONF_BINARY,
    PACMAN_CONF_ENV,
)
from pacjump.exceptions import ConfigError
from pacjump.utils.logger import get_logger

logger = get_logger("core.pacman_conf")

__all__ = [
    "SigLevel",
    "read_conf",
    "process_siglevel",
    "fold_siglevels",
    "default_siglevel",
    "repo_siglevel",
    "root_dir",
    "db_path",
    "repo_list",
]


class SigLevel(IntFlag):
    """Signature verification level, bit-compatible with libalpm."""

    PACKAGE = 1 << 0
    PACKAGE_OPTIONAL = 1 << 1
    PACKAGE_MARGINAL_OK = 1 << 2
    PACKAGE_UNKNOWN_OK = 1 << 3
    DATABASE = 1 << 10
    DATABASE_OPTIONAL = 1 << 11
    DATABASE_MARGINAL_OK = 1 << 12
    DATABASE_UNKNOWN_OK = 1 << 13
    USE_DEFAULT = 1 << 30


_PACKAGE_TRUST_ALL = SigLevel.PACKAGE_MARGINAL_OK | SigLevel.PACKAGE_UNKNOWN_OK
_DATABASE_TRUST_ALL = SigLevel.DATABASE_MARGINAL_OK | SigLevel.DATABASE_UNKNOWN_OK


def read_conf(args: Sequence[str]) -> Optional[str]:
    """Run ``pacman-conf`` with ``args`` and return its output.

    The locale is pinned to ``C.UTF-8`` so that user settings cannot
    change the output. A single trailing newline is stripped.

    Args:
        args: Arguments passed verbatim to ``pacman-conf``.

    Returns:
        The decoded standard output, or ``None`` if ``pacman-conf``
        cannot be run at all.
    """
    env: Dict[str, str] = {**os.environ, **PACMAN_CONF_ENV}
    try:
        completed = subprocess.run(
            [PACMAN_CONF_BINARY, *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            env=env,
            check=False,
        )
    except OSError as exc:
        logger.debug("Cannot run %s %s: %s", PACMAN_CONF_BINARY, list(args), exc)
        return None

    output = completed.stdout.decode("utf-8", errors="replace")
    if output.endswith("\n"):
        output = output[:-1]
    return output


def process_siglevel(default: SigLevel, siglevel: str) -> SigLevel:
    """Apply a single fine-grained ``SigLevel`` directive to ``default``.

    An empty (or whitespace-only) directive leaves ``default`` unchanged.
    Coarse directives such as plain ``Required`` are not produced by
    ``pacman-conf`` and are rejected.

    Args:
        default: Level the directive is stacked onto.
        siglevel: Directive, e.g. ``"PackageRequired"``.

    Returns:
        The updated :class:`SigLevel`.

    Raises:
        ConfigError: The directive is not recognized.

    Example::

        >>> process_siglevel(SigLevel.USE_DEFAULT, "PackageRequired")
        <SigLevel.PACKAGE: 1>
    """
    base = int(default)
    use_default = int(SigLevel.USE_DEFAULT)

    def slset(bits: int) -> int:
        return (base | int(bits)) & ~use_default

    def slunset(bits: int) -> int:
        return (base & ~int(bits)) & ~use_default

    directive = siglevel.strip()
    if directive == "":
        return default
    if directive == "PackageNever":
        value = slunset(SigLevel.PACKAGE)
    elif directive == "PackageOptional":
        value = slset(SigLevel.PACKAGE | SigLevel.PACKAGE_OPTIONAL)
    elif directive == "PackageRequired":
        value = slset(SigLevel.PACKAGE) & ~int(SigLevel.PACKAGE_OPTIONAL)
    elif directive == "PackageTrustedOnly":
        value = slunset(_PACKAGE_TRUST_ALL)
    elif directive == "PackageTrustAll":
        value = slset(_PACKAGE_TRUST_ALL)
    elif directive == "DatabaseNever":
        value = slunset(SigLevel.DATABASE)
    elif directive == "DatabaseOptional":
        value = slset(SigLevel.DATABASE | SigLevel.DATABASE_OPTIONAL)
    elif directive == "DatabaseRequired":
        value = slset(SigLevel.DATABASE) & ~int(SigLevel.DATABASE_OPTIONAL)
    elif directive == "DatabaseTrustedOnly":
        value = slunset(_DATABASE_TRUST_ALL)
    elif directive == "DatabaseTrustAll":
        value = slset(_DATABASE_TRUST_ALL)
    else:
        raise ConfigError(
            f"failed to parse the signature level: {directive}",
            option="SigLevel",
        )
    return SigLevel(value)


def fold_siglevels(default: SigLevel, siglevels: str) -> SigLevel:
    """Apply every line of a multi-line ``SigLevel`` answer in order."""
    level = default
    for line in siglevels.splitlines():
        level = process_siglevel(level, line)
    return level


def default_siglevel() -> SigLevel:
    """Return the global ``SigLevel`` of ``pacman.conf``."""
    return fold_siglevels(SigLevel.USE_DEFAULT, read_conf(["SigLevel"]) or "")


def repo_siglevel(repo: str, default: SigLevel) -> SigLevel:
    """Return the ``SigLevel`` of ``repo``, stacked onto ``default``."""
    answer = read_conf([f"--repo={repo}", "SigLevel"]) or ""
    return fold_siglevels(default, answer)


def root_dir() -> str:
    """Return the configured ``RootDir``."""
    return read_conf(["RootDir"]) or DEFAULT_ROOT_DIR


def db_path() -> str:
    """Return the configured ``DBPath``."""
    return read_conf(["DBPath"]) or DEFAULT_DB_PATH


def repo_list() -> List[str]:
    """Return the configured sync repositories, in ``pacman.conf`` order."""
    answer = read_conf(["--repo-list"]) or ""
    return [line.strip() for line in answer.splitlines() if line.strip()]
