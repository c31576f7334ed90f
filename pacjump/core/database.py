"""Database access contract for pacjump.

The resolver and the report builder never talk to libalpm directly; they
consume a :class:`PackageDatabase`, an already-opened, read-only view of
the local database and the sync databases. The production implementation
is :class:`pacjump.core.alpm_db.AlpmDatabase`.

A name missing from a database is routine and is reported as ``None``.
Dependencies naming a virtual package (``sh``, ``libgl``) are matched to a
real package through :meth:`PackageDatabase.find_provider`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional

from pacjump.models.record import RawSourceRecord

__all__ = ["PackageDatabase"]


class PackageDatabase(ABC):
    """Read-only access to the local and sync package databases."""

    @abstractmethod
    def lookup_local(self, name: str) -> Optional[RawSourceRecord]:
        """Return the installed record of ``name``, or ``None``."""

    @abstractmethod
    def lookup_sync(self, name: str) -> Optional[RawSourceRecord]:
        """Return the record of ``name`` from the first sync database
        carrying it, or ``None``."""

    @abstractmethod
    def list_explicit_names(self) -> List[str]:
        """Return names of explicitly installed packages."""

    @abstractmethod
    def list_all_local_names(self) -> List[str]:
        """Return names of every installed package."""

    @abstractmethod
    def list_sync_names(self) -> List[str]:
        """Return names of every package in the sync databases.

        A name present in several repositories is listed once, for the
        first repository carrying it.
        """

    @abstractmethod
    def iter_sync_records(self) -> Iterator[RawSourceRecord]:
        """Yield every record of every sync database."""

    @abstractmethod
    def find_provider(self, requirement: str) -> Optional[RawSourceRecord]:
        """Return a package satisfying ``requirement`` through its
        ``provides``, or ``None``.

        ``requirement`` is a dependency without its description, such as
        ``sh`` or ``libfoo.so=1-64``. Installed packages are searched
        first, then the sync databases in priority order.
        """

    def lookup(self, name: str) -> Optional[RawSourceRecord]:
        """Return the local record of ``name`` if any, else the sync one."""
        local = self.lookup_local(name)
        if local is not None:
            return local
        return self.lookup_sync(name)
