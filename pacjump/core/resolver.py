"""Dependency closure resolution for pacjump.

Given a root package, :class:`ClosureResolver` computes every package
reachable through dependency edges, breadth-first:

1. The root is looked up first; a root known to no database is an error
   (:class:`~pacjump.exceptions.UnknownPackage`).
2. Each dequeued name is looked up in the local database, falling back to
   the sync databases, and its ``depends`` (plus ``optional_depends`` when
   requested) are parsed.
3. Every dependency is resolved to the package satisfying it: the package
   of that exact name if one exists, else a package whose ``provides``
   satisfies the requirement (``sh`` is satisfied by ``bash``).
4. Satisfiers not yet seen are appended to the queue; a name is expanded
   at most once, so shared dependencies and cycles cost nothing extra.
5. A dependency nothing satisfies is kept as an unresolved leaf.

The result lists every name once, root first, in discovery order.

Typical usage::

    resolver = ClosureResolver(database)
    closure = resolver.resolve("texstudio")
    # ['texstudio', 'poppler-qt5', 'texlive-core', 'poppler']
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set

from pacjump.core.database import PackageDatabase
from pacjump.exceptions import MalformedDependencySpecifier, UnknownPackage
from pacjump.models.dependency import DependencySpec, parse_dependency
from pacjump.models.record import PackageRecord, RawSourceRecord
from pacjump.utils.logger import get_logger

logger = get_logger("core.resolver")

__all__ = ["ClosureResolver", "Closure", "dependency_names", "dependency_specs"]


def dependency_specs(
    record: PackageRecord, *, include_optional: bool = False
) -> List[DependencySpec]:
    """Return the parsed outgoing dependency edges of ``record``.

    Mandatory dependencies come first, then optional ones when
    ``include_optional`` is set, each in catalog order. Specifiers that
    cannot be parsed are logged and skipped.

    Args:
        record: Record whose dependencies are read.
        include_optional: Also follow ``optional_depends``.

    Returns:
        Parsed specifiers, possibly with repeated names.
    """
    specifiers = list(record.depends)
    if include_optional:
        specifiers.extend(record.optional_depends)

    specs: List[DependencySpec] = []
    for specifier in specifiers:
        try:
            specs.append(parse_dependency(specifier, package=record.name))
        except MalformedDependencySpecifier as exc:
            logger.warning("Skipping dependency of %s: %s", record.name, exc)
    return specs


def dependency_names(record: PackageRecord, *, include_optional: bool = False) -> List[str]:
    """Return the bare names of the outgoing dependency edges of ``record``."""
    return [spec.name for spec in dependency_specs(record, include_optional=include_optional)]


@dataclass
class Closure:
    """Outcome of one closure computation.

    Attributes:
        root: Name the traversal started from.
        names: Every reached name, root first, in discovery order.
        depth: Breadth-first level at which each name was discovered.
        unresolved: Names found in no database.
        satisfiers: Requirement → name of the package providing it, for
            dependencies met through ``provides`` rather than by name.
    """

    root: str
    names: List[str] = field(default_factory=list)
    depth: Dict[str, int] = field(default_factory=dict)
    unresolved: List[str] = field(default_factory=list)
    satisfiers: Dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.depth


class ClosureResolver:
    """Breadth-first dependency closure over a :class:`PackageDatabase`.

    Args:
        database: Opened, read-only package database.
    """

    def __init__(self, database: PackageDatabase) -> None:
        self.database = database

    def resolve(self, root_name: str, include_optional: bool = False) -> List[str]:
        """Return the names reachable from ``root_name``, root first.

        Args:
            root_name: Package to start from.
            include_optional: Follow optional dependencies as well.

        Returns:
            Distinct names in breadth-first discovery order.

        Raises:
            UnknownPackage: ``root_name`` is in neither database.
        """
        return self.resolve_closure(root_name, include_optional).names

    def resolve_closure(self, root_name: str, include_optional: bool = False) -> Closure:
        """Like :meth:`resolve`, with depth, provider and unresolved-leaf details."""
        root = self.database.lookup(root_name)
        if root is None:
            raise UnknownPackage(root_name)

        closure = Closure(root=root_name)
        records: Dict[str, Optional[RawSourceRecord]] = {root_name: root}
        providers: Dict[str, Optional[RawSourceRecord]] = {}
        visited: Set[str] = {root_name}
        queue: Deque[str] = deque([root_name])
        closure.depth[root_name] = 0

        while queue:
            name = queue.popleft()
            closure.names.append(name)
            level = closure.depth[name]

            raw = records.get(name)
            if raw is None:
                logger.debug("Level %d: %s not found, kept as a leaf", level, name)
                closure.unresolved.append(name)
                continue

            specs = dependency_specs(raw.record, include_optional=include_optional)
            logger.debug(
                "Level %d: recursing into %s: %s", level, name, [spec.raw for spec in specs]
            )

            for spec in specs:
                target = self._satisfy(spec, records, providers, closure)
                if target in visited:
                    logger.debug(
                        "Level %d: duplicated dependency: %s provides %s",
                        level + 1,
                        target,
                        spec.requirement,
                    )
                    continue
                visited.add(target)
                closure.depth[target] = level + 1
                queue.append(target)

        logger.info(
            "Resolved %d package(s) from %s (%d unresolved)",
            len(closure.names),
            root_name,
            len(closure.unresolved),
        )
        return closure

    def _satisfy(
        self,
        spec: DependencySpec,
        records: Dict[str, Optional[RawSourceRecord]],
        providers: Dict[str, Optional[RawSourceRecord]],
        closure: Closure,
    ) -> str:
        """Return the name of the package satisfying ``spec``.

        A package carrying the exact name wins. Otherwise the first
        provider is used, and failing that the bare name is returned so it
        ends up as an unresolved leaf.
        """
        if spec.name not in records:
            records[spec.name] = self.database.lookup(spec.name)
        if records[spec.name] is not None:
            return spec.name

        requirement = spec.requirement
        if requirement not in providers:
            providers[requirement] = self.database.find_provider(requirement)
        provider = providers[requirement]
        if provider is None:
            return spec.name

        closure.satisfiers[requirement] = provider.name
        records.setdefault(provider.name, provider)
        return provider.name
