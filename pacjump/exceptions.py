"""
Custom exception hierarchy for pacjump.

All exceptions inherit from :class:`PacjumpError` and carry optional
structured metadata via the ``details`` attribute. Each fatal error also
declares the process ``exit_code`` the CLI should return for it.

A package missing from one database is not an error at all: lookups
return ``None`` and the caller falls back.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional

from pacjump.constants import EXIT_ERROR, EXIT_UNKNOWN_PACKAGE


class PacjumpError(Exception):
    """Base exception for all pacjump errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    exit_code: int = EXIT_ERROR

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


class UnknownPackage(PacjumpError):
    """Raised when the root of a closure request exists in no database.

    Args:
        name: The package name that was requested.
    """

    __slots__ = ("name",)

    exit_code = EXIT_UNKNOWN_PACKAGE

    def __init__(self, name: str) -> None:
        super().__init__(
            f"package {name!r} was not found in the local or sync databases"
        )
        self.name = name


class DatabaseUnavailable(PacjumpError):
    """Raised when the pacman databases cannot be opened or read.

    Args:
        message: Error description.
        root_dir: ALPM root directory in use.
        db_path: ALPM database path in use.
        original_error: Underlying exception, if any.
    """

    __slots__ = ("root_dir", "db_path", "original_error")

    def __init__(
        self,
        message: str,
        *,
        root_dir: Optional[str] = None,
        db_path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "root", root_dir)
        _add_if(details, "dbpath", db_path)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.root_dir = root_dir
        self.db_path = db_path
        self.original_error = original_error


class MalformedDependencySpecifier(PacjumpError):
    """Raised when a dependency string yields no usable package name.

    Callers traversing the dependency graph catch this, skip the edge
    and keep going.

    Args:
        specifier: The raw dependency string.
        package: Package that declared the dependency, if known.
    """

    __slots__ = ("specifier", "package")

    def __init__(self, specifier: str, *, package: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package)
        super().__init__(f"malformed dependency specifier {specifier!r}", details)

        self.specifier = specifier
        self.package = package


class ConfigError(PacjumpError):
    """Raised when configuration cannot be loaded or is invalid.

    Args:
        message: Error description.
        config_path: Path to the offending configuration file.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
