"""pyalpm-backed implementation of :class:`PackageDatabase`.

One :class:`pyalpm.Handle` is opened per run on the configured root and
database path. Every repository of ``pacman.conf`` is registered as a
sync database with its own signature level, in configuration order, so
that :meth:`AlpmDatabase.lookup_sync` honours repository priority the way
pacman does.

Typical usage::

    from pacjump.core.alpm_db import AlpmDatabase

    database = AlpmDatabase.open()
    record = database.lookup_local("bash")
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Sequence

from pacjump.core import pacman_conf
from pacjump.core.database import PackageDatabase
from pacjump.core.pacman_conf import SigLevel
from pacjump.exceptions import DatabaseUnavailable
from pacjump.models.record import (
    InstallReason,
    PackageRecord,
    RawSourceRecord,
    Source,
)
from pacjump.utils.logger import get_logger

logger = get_logger("core.alpm_db")

__all__ = ["AlpmDatabase", "record_from_package"]

# libalpm package reasons
_REASON_EXPLICIT = 0
_REASON_DEPEND = 1


def _import_pyalpm() -> Any:
    try:
        import pyalpm
    except ImportError as exc:
        raise DatabaseUnavailable(
            "pyalpm is required to read the pacman databases; "
            "install it with: pip install 'pacjump[alpm]'",
            original_error=exc,
        ) from exc
    return pyalpm


def _reason(value: Optional[int]) -> Optional[InstallReason]:
    if value == _REASON_EXPLICIT:
        return InstallReason.EXPLICIT
    if value == _REASON_DEPEND:
        return InstallReason.DEPENDENCY
    return None


def record_from_package(package: Any, source: Source) -> RawSourceRecord:
    """Convert a ``pyalpm.Package`` into a :class:`RawSourceRecord`.

    Sync packages carry no install information, so ``install_date`` and
    ``install_reason`` are only read for local packages.
    """
    db = getattr(package, "db", None)
    is_local = source is Source.LOCAL

    record = PackageRecord(
        name=package.name,
        version=package.version or "",
        description=package.desc or None,
        repository=db.name if db is not None else "",
        architecture=package.arch or None,
        url=package.url or None,
        licenses=tuple(package.licenses or ()),
        groups=tuple(package.groups or ()),
        provides=tuple(package.provides or ()),
        depends=tuple(package.depends or ()),
        optional_depends=tuple(package.optdepends or ()),
        make_depends=tuple(package.makedepends or ()),
        check_depends=tuple(package.checkdepends or ()),
        conflicts=tuple(package.conflicts or ()),
        replaces=tuple(package.replaces or ()),
        download_size=package.size or 0,
        installed_size=package.isize or 0,
        packager=package.packager or None,
        build_date=package.builddate or 0,
        install_date=(package.installdate or None) if is_local else None,
        install_reason=_reason(package.reason) if is_local else None,
        install_script=bool(package.has_scriptlet),
        md5_sum=package.md5sum or None,
        sha256_sum=package.sha256sum or None,
        signature=None if is_local else (package.base64_sig or None),
    )
    return RawSourceRecord(source, record)


class AlpmDatabase(PackageDatabase):
    """Read-only view of the local and sync pacman databases.

    Args:
        handle: An initialized ``pyalpm.Handle`` with its sync databases
            already registered.
    """

    def __init__(self, handle: Any) -> None:
        self._handle = handle
        self._localdb = handle.get_localdb()
        self._syncdbs = list(handle.get_syncdbs())

    @classmethod
    def open(
        cls,
        *,
        root_dir: Optional[str] = None,
        db_path: Optional[str] = None,
        repositories: Optional[Sequence[str]] = None,
    ) -> "AlpmDatabase":
        """Open the databases, asking ``pacman-conf`` for unset values.

        Args:
            root_dir: ALPM root; defaults to ``pacman-conf RootDir``.
            db_path: ALPM database path; defaults to ``pacman-conf DBPath``.
            repositories: Sync repositories to register; defaults to
                ``pacman-conf --repo-list``.

        Raises:
            DatabaseUnavailable: pyalpm is missing or the handle cannot be
                initialized.
            ConfigError: A repository has an unparseable ``SigLevel``.
        """
        pyalpm = _import_pyalpm()

        root = root_dir or pacman_conf.root_dir()
        dbpath = db_path or pacman_conf.db_path()
        repos = list(repositories) if repositories is not None else pacman_conf.repo_list()
        logger.info("RootDir: %s", root)
        logger.info("DBPath: %s", dbpath)

        try:
            handle = pyalpm.Handle(root, dbpath)
        except pyalpm.error as exc:
            raise DatabaseUnavailable(
                "cannot initialize the pacman databases",
                root_dir=root,
                db_path=dbpath,
                original_error=exc,
            ) from exc

        default_level = pacman_conf.default_siglevel()
        logger.debug("Default SigLevel: %r", default_level)

        for repo in repos:
            level = pacman_conf.repo_siglevel(repo, default_level)
            try:
                handle.register_syncdb(repo, int(level))
            except pyalpm.error as exc:
                raise DatabaseUnavailable(
                    f"cannot register sync database {repo!r}",
                    root_dir=root,
                    db_path=dbpath,
                    original_error=exc,
                ) from exc
            logger.debug("Registered %s with SigLevel %r", repo, SigLevel(level))

        return cls(handle)

    # ------------------------------------------------------------------
    # PackageDatabase
    # ------------------------------------------------------------------

    def lookup_local(self, name: str) -> Optional[RawSourceRecord]:
        package = self._localdb.get_pkg(name)
        if package is None:
            return None
        return record_from_package(package, Source.LOCAL)

    def lookup_sync(self, name: str) -> Optional[RawSourceRecord]:
        for db in self._syncdbs:
            package = db.get_pkg(name)
            if package is not None:
                return record_from_package(package, Source.SYNC)
        return None

    def list_explicit_names(self) -> List[str]:
        return [
            package.name
            for package in self._localdb.pkgcache
            if package.reason == _REASON_EXPLICIT
        ]

    def list_all_local_names(self) -> List[str]:
        return [package.name for package in self._localdb.pkgcache]

    def list_sync_names(self) -> List[str]:
        seen: Dict[str, None] = {}
        for db in self._syncdbs:
            for package in db.pkgcache:
                seen.setdefault(package.name, None)
        return list(seen)

    def iter_sync_records(self) -> Iterator[RawSourceRecord]:
        for db in self._syncdbs:
            for package in db.pkgcache:
                yield record_from_package(package, Source.SYNC)

    def find_provider(self, requirement: str) -> Optional[RawSourceRecord]:
        pyalpm = _import_pyalpm()
        package = pyalpm.find_satisfier(self._localdb.pkgcache, requirement)
        if package is not None:
            return record_from_package(package, Source.LOCAL)
        for db in self._syncdbs:
            package = pyalpm.find_satisfier(db.pkgcache, requirement)
            if package is not None:
                return record_from_package(package, Source.SYNC)
        return None

    def __repr__(self) -> str:
        repos = [db.name for db in self._syncdbs]
        return f"AlpmDatabase(sync={repos!r})"
