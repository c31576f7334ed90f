"""Shared fixtures for the pacjump test suite.

:class:`MemoryDatabase` implements :class:`PackageDatabase` over plain
dictionaries so the resolver, the report builder and the CLI can be
exercised without libalpm.
"""

from __future__ import annotations

import logging
from typing import Dict, Generator, Iterable, Iterator, List, Optional

import pytest

from pacjump.core.database import PackageDatabase
from pacjump.models.dependency import parse_dependency
from pacjump.models.record import (
    InstallReason,
    PackageRecord,
    RawSourceRecord,
    Source,
)


class MemoryDatabase(PackageDatabase):
    """In-memory package database.

    Args:
        local: Installed records.
        sync: Repository name → records, in priority order.
    """

    def __init__(
        self,
        local: Iterable[PackageRecord] = (),
        sync: Optional[Dict[str, Iterable[PackageRecord]]] = None,
    ) -> None:
        self.local: Dict[str, PackageRecord] = {r.name: r for r in local}
        self.sync: Dict[str, Dict[str, PackageRecord]] = {
            repo: {r.name: r for r in records} for repo, records in (sync or {}).items()
        }
        self.lookups: List[str] = []

    def lookup_local(self, name: str) -> Optional[RawSourceRecord]:
        self.lookups.append(name)
        record = self.local.get(name)
        return RawSourceRecord(Source.LOCAL, record) if record else None

    def lookup_sync(self, name: str) -> Optional[RawSourceRecord]:
        for records in self.sync.values():
            if name in records:
                return RawSourceRecord(Source.SYNC, records[name])
        return None

    def list_explicit_names(self) -> List[str]:
        return [
            name
            for name, record in self.local.items()
            if record.install_reason is InstallReason.EXPLICIT
        ]

    def list_all_local_names(self) -> List[str]:
        return list(self.local)

    def list_sync_names(self) -> List[str]:
        names: Dict[str, None] = {}
        for records in self.sync.values():
            for name in records:
                names.setdefault(name, None)
        return list(names)

    def iter_sync_records(self) -> Iterator[RawSourceRecord]:
        for records in self.sync.values():
            for record in records.values():
                yield RawSourceRecord(Source.SYNC, record)

    def find_provider(self, requirement: str) -> Optional[RawSourceRecord]:
        """Match on provided names; versions are compared only for ``=``."""
        wanted = parse_dependency(requirement)
        candidates = [RawSourceRecord(Source.LOCAL, r) for r in self.local.values()]
        candidates.extend(self.iter_sync_records())
        for raw in candidates:
            for provided in map(parse_dependency, raw.record.provides):
                if provided.name != wanted.name:
                    continue
                if wanted.operator == "=" and provided.version != wanted.version:
                    continue
                return raw
        return None


def local_pkg(name: str, *, explicit: bool = False, **fields) -> PackageRecord:
    """Build an installed record."""
    fields.setdefault("version", "1.0-1")
    fields.setdefault("repository", "local")
    reason = InstallReason.EXPLICIT if explicit else InstallReason.DEPENDENCY
    return PackageRecord(name=name, install_reason=reason, **fields)


def sync_pkg(name: str, repo: str = "extra", **fields) -> PackageRecord:
    """Build a repository record."""
    fields.setdefault("version", "1.0-1")
    return PackageRecord(name=name, repository=repo, **fields)


@pytest.fixture
def texstudio_db() -> MemoryDatabase:
    """texstudio → poppler-qt5 → poppler, texstudio → texlive-core."""
    local = [
        local_pkg(
            "texstudio",
            explicit=True,
            version="4.7.2-1",
            depends=("poppler-qt5", "texlive-core>=2023"),
            optional_depends=("hunspell: spell checking",),
            installed_size=38_000_000,
        ),
        local_pkg("poppler-qt5", depends=("poppler=23.08.0",)),
        local_pkg("texlive-core"),
        local_pkg("poppler", depends=()),
    ]
    sync = {
        "extra": [
            sync_pkg(
                "texstudio",
                version="4.7.3-1",
                description="Integrated writing environment for LaTeX",
                packager="Jane Doe <jane@archlinux.org>",
                depends=("poppler-qt5", "texlive-core>=2023"),
            ),
            sync_pkg("poppler-qt5", description="Poppler Qt5 bindings"),
            sync_pkg("poppler", description="PDF rendering library"),
            sync_pkg("hunspell", description="Spell checker"),
        ],
    }
    return MemoryDatabase(local, sync)


@pytest.fixture(autouse=True)
def clean_logger_state() -> Generator[None, None, None]:
    """Reset the pacjump logger before and after a test."""
    root_logger = logging.getLogger("pacjump")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True

    yield

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
