"""
Centralized constants for pacjump.

This module defines immutable configuration values used across pacjump,
including pacman-conf invocation details, configuration discovery, exit
codes and logging formats. All values are intended to be treated as
read-only.
"""

from typing import Final, Mapping, Sequence

# ---------------------------------------------------------------------------
# pacman-conf
# ---------------------------------------------------------------------------

#: Executable used to read the effective ``pacman.conf``.
PACMAN_CONF_BINARY: Final[str] = "pacman-conf"

#: Environment overrides so user locales do not change the output.
#: See https://sourceware.org/bugzilla/show_bug.cgi?id=16621
PACMAN_CONF_ENV: Final[Mapping[str, str]] = {
    "LC_ALL": "C.UTF-8",
    "LANGUAGE": "C.UTF-8",
}

#: Fallbacks used when ``pacman-conf`` is unavailable.
DEFAULT_ROOT_DIR: Final[str] = "/"
DEFAULT_DB_PATH: Final[str] = "/var/lib/pacman/"

#: Repository tag reported for installed packages absent from every repo.
LOCAL_REPOSITORY: Final[str] = "local"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

#: Config file looked up in the current directory.
CONFIG_FILE_NAME: Final[str] = "pacjump.toml"

#: Environment variable holding an explicit config path.
CONFIG_ENV_VAR: Final[str] = "PACJUMP_CONFIG"

#: Enrich local records from the sync databases by default.
DEFAULT_ENRICH: Final[bool] = True

#: Follow optional dependencies during ``--recurse`` by default.
DEFAULT_INCLUDE_OPTIONAL: Final[bool] = False

# ---------------------------------------------------------------------------
# Dependency specifiers
# ---------------------------------------------------------------------------

#: Version comparison operators understood by pacman, longest first.
DEPENDENCY_OPERATORS: Final[Sequence[str]] = (">=", "<=", "=", "<", ">")

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_OK: Final[int] = 0
EXIT_ERROR: Final[int] = 1
EXIT_UNKNOWN_PACKAGE: Final[int] = 3
EXIT_INTERRUPTED: Final[int] = 130

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
