"""Reverse dependency index for pacjump.

libalpm can compute the reverse dependencies of a single package, but it
does so by scanning every database on each call, which is far too slow
when dumping a whole database. :class:`ReverseDepsIndex` instead walks the
sync databases once and inverts every ``depends``, ``optional_depends``,
``make_depends`` and ``check_depends`` edge into a map from a package name
to the names that depend on it.
"""

from __future__ import annotations

from collections import defaultdict
from typing import DefaultDict, Iterable, NamedTuple, Set, Tuple

from pacjump.core.database import PackageDatabase
from pacjump.exceptions import MalformedDependencySpecifier
from pacjump.models.dependency import bare_name
from pacjump.models.record import PackageRecord
from pacjump.utils.logger import get_logger

logger = get_logger("core.reverse_deps")

__all__ = ["ReverseDeps", "ReverseDepsIndex"]

ReverseDepsMap = DefaultDict[str, Set[str]]


class ReverseDeps(NamedTuple):
    """Sorted reverse dependencies of one package."""

    required_by: Tuple[str, ...] = ()
    optional_for: Tuple[str, ...] = ()
    required_by_make: Tuple[str, ...] = ()
    required_by_check: Tuple[str, ...] = ()


def _invert(
    index: ReverseDepsMap,
    dependent: str,
    specifiers: Iterable[str],
) -> None:
    for specifier in specifiers:
        try:
            target = bare_name(specifier, package=dependent)
        except MalformedDependencySpecifier as exc:
            logger.debug("Skipping reverse edge: %s", exc)
            continue
        index[target].add(dependent)


def _sorted(index: ReverseDepsMap, name: str) -> Tuple[str, ...]:
    return tuple(sorted(index.get(name, ())))


class ReverseDepsIndex:
    """Maps package names to the packages requiring them.

    Attributes:
        required_by: Name → names listing it in ``depends``.
        optional_for: Name → names listing it in ``optional_depends``.
        required_by_make: Name → names listing it in ``make_depends``.
        required_by_check: Name → names listing it in ``check_depends``.
    """

    def __init__(self) -> None:
        self.required_by: ReverseDepsMap = defaultdict(set)
        self.optional_for: ReverseDepsMap = defaultdict(set)
        self.required_by_make: ReverseDepsMap = defaultdict(set)
        self.required_by_check: ReverseDepsMap = defaultdict(set)

    @classmethod
    def from_records(cls, records: Iterable[PackageRecord]) -> "ReverseDepsIndex":
        """Build the index from any collection of records."""
        index = cls()
        count = 0
        for record in records:
            _invert(index.required_by, record.name, record.depends)
            _invert(index.optional_for, record.name, record.optional_depends)
            _invert(index.required_by_make, record.name, record.make_depends)
            _invert(index.required_by_check, record.name, record.check_depends)
            count += 1
        logger.debug("Indexed reverse dependencies of %d package(s)", count)
        return index

    @classmethod
    def from_database(cls, database: PackageDatabase) -> "ReverseDepsIndex":
        """Build the index from every sync database record."""
        return cls.from_records(raw.record for raw in database.iter_sync_records())

    def lookup(self, name: str) -> ReverseDeps:
        """Return every reverse dependency kind of ``name``, sorted."""
        return ReverseDeps(
            required_by=_sorted(self.required_by, name),
            optional_for=_sorted(self.optional_for, name),
            required_by_make=_sorted(self.required_by_make, name),
            required_by_check=_sorted(self.required_by_check, name),
        )

    def annotate(self, record: PackageRecord) -> PackageRecord:
        """Return ``record`` with its reverse dependencies filled in."""
        return record.with_reverse_deps(*self.lookup(record.name))
