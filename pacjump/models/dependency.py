"""
Dependency specifier parsing for pacjump.

pacman declares dependencies as plain strings. A specifier is a package
name, optionally followed by a version constraint, optionally followed by
a ``": description"`` (used by optional dependencies)::

    glibc
    glibc>=2.38
    python-six=1.16.0-3
    poppler-data: encoding data to display PDF documents

Only the bare name is needed to walk the dependency graph; records keep
the original string for display.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from pacjump.constants import DEPENDENCY_OPERATORS
from pacjump.exceptions import MalformedDependencySpecifier

# pacman package names: alphanumerics and @._+-, never starting with - or .
_NAME_RE = re.compile(r"^[A-Za-z0-9@_+][A-Za-z0-9@._+-]*$")
_OPERATOR_RE = re.compile(
    "(" + "|".join(re.escape(op) for op in DEPENDENCY_OPERATORS) + ")"
)


@dataclass(frozen=True)
class DependencySpec:
    """A parsed pacman dependency specifier.

    Attributes:
        raw: The original string, unmodified.
        name: Bare package name used for lookups.
        operator: Version comparison operator, if any.
        version: Version the operator applies to, if any.
        description: Reason text of an optional dependency, if any.
    """

    raw: str
    name: str
    operator: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_versioned(self) -> bool:
        return self.operator is not None

    @property
    def requirement(self) -> str:
        """The specifier without its description, as libalpm matches it."""
        if self.operator is None:
            return self.name
        return f"{self.name}{self.operator}{self.version}"

    def __str__(self) -> str:
        return self.raw


def parse_dependency(
    specifier: str,
    *,
    package: Optional[str] = None,
) -> DependencySpec:
    """Parse a dependency specifier into its parts.

    Args:
        specifier: Raw dependency string as found in a package record.
        package: Name of the declaring package, used for error details.

    Returns:
        The parsed :class:`DependencySpec`.

    Raises:
        MalformedDependencySpecifier: No valid package name can be
            extracted, or a version operator has no version.

    Example::

        >>> parse_dependency("glibc>=2.38").name
        'glibc'
        >>> parse_dependency("poppler-data: encoding data").description
        'encoding data'
    """
    if not isinstance(specifier, str):
        raise MalformedDependencySpecifier(repr(specifier), package=package)

    # ": " separates the description; a bare ":" may be a version epoch
    text, _, description = specifier.strip().partition(": ")
    text = text.strip()
    if text.endswith(":"):
        text = text[:-1].rstrip()
    description = description.strip() or None

    match = _OPERATOR_RE.search(text)
    if match:
        name = text[: match.start()].strip()
        operator = match.group(1)
        version = text[match.end():].strip()
        if not version:
            raise MalformedDependencySpecifier(specifier, package=package)
    else:
        name, operator, version = text, None, None

    if not _NAME_RE.match(name):
        raise MalformedDependencySpecifier(specifier, package=package)

    return DependencySpec(
        raw=specifier,
        name=name,
        operator=operator,
        version=version,
        description=description,
    )


def bare_name(specifier: str, *, package: Optional[str] = None) -> str:
    """Return only the package name of a dependency specifier.

    Raises:
        MalformedDependencySpecifier: See :func:`parse_dependency`.
    """
    return parse_dependency(specifier, package=package).name
