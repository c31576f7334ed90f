"""Configuration file loader for pacjump.

Handles discovery, loading, parsing, and validation of ``pacjump.toml``.
Settings live under a ``[pacjump]`` table.

Discovery order:

1. Explicit path from ``--config`` or ``PACJUMP_CONFIG``
2. ``pacjump.toml`` in current directory
3. ``$XDG_CONFIG_HOME/pacjump/pacjump.toml`` (``~/.config`` by default)

Configuration precedence: defaults < config file < CLI args. Database
locations left unset are asked from ``pacman-conf`` when the databases are
opened.

Example (``pacjump.toml``)::

    [pacjump]
    db_path = "/tmp/checkup-db/"
    repositories = ["core", "extra"]
    enrich = true
    include_optional = false
"""

from __future__ import annotations

import os

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from pacjump.exceptions import ConfigError
from pacjump.utils.logger import get_logger
from pacjump.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_ENRICH,
    DEFAULT_INCLUDE_OPTIONAL,
)

logger = get_logger("config")


@dataclass
class PacjumpConfig:
    """Parsed and validated pacjump configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        root_dir: ALPM root directory; ``None`` asks ``pacman-conf``.
        db_path: ALPM database path; ``None`` asks ``pacman-conf``.
        repositories: Sync repositories to register; ``None`` asks
            ``pacman-conf``.
        enrich: Combine local and sync records unless ``--plain``.
        include_optional: Follow optional dependencies during
            ``--recurse`` even without ``--optional``.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    root_dir: Optional[str] = None
    db_path: Optional[str] = None
    repositories: Optional[List[str]] = None
    enrich: bool = DEFAULT_ENRICH
    include_optional: bool = DEFAULT_INCLUDE_OPTIONAL

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "root_dir": self.root_dir,
            "db_path": self.db_path,
            "repositories": self.repositories,
            "enrich": self.enrich,
            "include_optional": self.include_optional,
        }


def _user_config_file() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "pacjump" / CONFIG_FILE_NAME


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    # 1. Explicit path takes priority
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    # 2. pacjump.toml in current directory
    local_toml = Path.cwd() / CONFIG_FILE_NAME
    if local_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, local_toml)
        return local_toml

    # 3. per-user configuration
    user_toml = _user_config_file()
    if user_toml.is_file():
        logger.debug("Found user config: %s", user_toml)
        return user_toml

    logger.debug("No configuration file found")
    return None


def load_config(config_path: Optional[Path] = None) -> PacjumpConfig:
    """Load and validate pacjump configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`PacjumpConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return PacjumpConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    section = raw.get("pacjump", {})
    if not section:
        logger.debug("Config file found but no [pacjump] section, using defaults")
        return PacjumpConfig(source_path=resolved)

    if not isinstance(section, dict):
        raise ConfigError(
            "[pacjump] must be a table",
            config_path=str(resolved),
        )

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


_BOOL_OPTIONS = ("enrich", "include_optional")
_STR_OPTIONS = ("root_dir", "db_path")


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> PacjumpConfig:
    """Parse and validate the ``[pacjump]`` table.

    Rejects unknown keys and type mismatches.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = PacjumpConfig()

    known_top = {*_BOOL_OPTIONS, *_STR_OPTIONS, "repositories"}

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    for option in _BOOL_OPTIONS:
        if option in section:
            val = section[option]
            if not isinstance(val, bool):
                raise ConfigError(
                    f"{option} must be a boolean, got {type(val).__name__}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, val)

    for option in _STR_OPTIONS:
        if option in section:
            val = section[option]
            if not isinstance(val, str) or not val:
                raise ConfigError(
                    f"{option} must be a non-empty string, got {val!r}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, val)

    if "repositories" in section:
        val = section["repositories"]
        if not isinstance(val, list) or not all(
            isinstance(repo, str) and repo for repo in val
        ):
            raise ConfigError(
                "repositories must be a list of repository names",
                config_path=config_path,
                option="repositories",
            )
        config.repositories = list(val)

    return config
