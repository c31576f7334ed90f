"""Report assembly for pacjump.

:class:`ReportBuilder` turns a selection :data:`Mode` into the ordered,
de-duplicated list of :class:`~pacjump.models.record.MergedRecord`
objects that ends up in the JSON document:

1. **Name collection**: the database listings for the installed-package
   modes, or the :class:`~pacjump.core.resolver.ClosureResolver` for a
   dependency closure.
2. **Merge**: every name's local and sync records are combined under the
   same policy regardless of mode (see
   :func:`~pacjump.models.record.merge_sources`).
3. **Annotation**: reverse dependencies are filled in when an index is
   available.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from pacjump.core.database import PackageDatabase
from pacjump.core.resolver import ClosureResolver
from pacjump.core.reverse_deps import ReverseDepsIndex
from pacjump.models.record import MergedRecord, merge_sources
from pacjump.utils.logger import get_logger

logger = get_logger("core.report")

__all__ = [
    "AllInstalled",
    "ExplicitlyInstalled",
    "ClosureOf",
    "Mode",
    "ReportBuilder",
]


@dataclass(frozen=True)
class AllInstalled:
    """Every installed package, or every catalog package with ``sync``."""

    sync: bool = False


@dataclass(frozen=True)
class ExplicitlyInstalled:
    """Explicitly installed packages.

    With ``sync`` the names are taken from the sync catalog and restricted
    to those explicitly installed.
    """

    sync: bool = False


@dataclass(frozen=True)
class ClosureOf:
    """The dependency closure of ``name``."""

    name: str
    include_optional: bool = False


Mode = Union[AllInstalled, ExplicitlyInstalled, ClosureOf]


class ReportBuilder:
    """Collects names for a :data:`Mode` and merges their records.

    Args:
        database: Opened, read-only package database.
        reverse_deps: Optional reverse dependency index used to fill
            ``required_by`` and ``optional_for``.
    """

    def __init__(
        self,
        database: PackageDatabase,
        reverse_deps: Optional[ReverseDepsIndex] = None,
    ) -> None:
        self.database = database
        self.reverse_deps = reverse_deps
        self.resolver = ClosureResolver(database)

    def build(self, mode: Mode, enrich: bool = True) -> List[MergedRecord]:
        """Return the merged records selected by ``mode``.

        Args:
            mode: Which packages to report.
            enrich: Fill local gaps from the sync databases.

        Returns:
            One record per distinct name, in collection order.

        Raises:
            UnknownPackage: ``mode`` is a :class:`ClosureOf` whose root is
                in neither database.
        """
        names = self.collect_names(mode)
        records = [self.merge(name, enrich=enrich) for name in _unique(names)]
        logger.info("Built %d record(s) for %s", len(records), mode)
        return records

    def collect_names(self, mode: Mode) -> List[str]:
        """Return the names selected by ``mode``, possibly with repeats."""
        if isinstance(mode, ClosureOf):
            return self.resolver.resolve(mode.name, mode.include_optional)

        if isinstance(mode, AllInstalled):
            if mode.sync:
                return self.database.list_sync_names()
            return self.database.list_all_local_names()

        if isinstance(mode, ExplicitlyInstalled):
            explicit = self.database.list_explicit_names()
            if mode.sync:
                wanted = set(explicit)
                return [n for n in self.database.list_sync_names() if n in wanted]
            return explicit

        raise TypeError(f"unsupported report mode: {mode!r}")

    def merge(self, name: str, *, enrich: bool = True) -> MergedRecord:
        """Merge the local and sync records of a single ``name``."""
        local = self.database.lookup_local(name)
        sync = None
        if enrich or local is None:
            sync = self.database.lookup_sync(name)

        merged = merge_sources(name, local, sync, enrich=enrich)
        if not merged.resolved:
            logger.debug("%s found in no database, emitting a stub", name)

        if self.reverse_deps is not None:
            merged = MergedRecord(
                self.reverse_deps.annotate(merged.record),
                merged.sources,
            )
        return merged


def _unique(names: Iterable[str]) -> List[str]:
    """Drop repeated names, keeping the first occurrence."""
    return list(dict.fromkeys(names))
