"""
Package record model for pacjump.

A package may be described by two databases at once: the local database
(what is actually installed) and a sync database (what the repository
currently publishes). Both are read into the same :class:`PackageRecord`
schema, tagged with their :class:`Source`, and reconciled field by field
by :func:`merge_records`.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from pacjump.constants import LOCAL_REPOSITORY


class Source(Enum):
    """Database a raw record was read from."""

    LOCAL = "local"
    SYNC = "sync"


class InstallReason(Enum):
    """Why a package is installed."""

    EXPLICIT = "explicit"
    DEPENDENCY = "dependency"


@dataclass(frozen=True)
class PackageRecord:
    """Metadata of one package, as far as a database knows it.

    Every field except ``name`` may be empty; an empty field means
    "unknown to this source". Sequences are tuples so records can be
    shared freely.

    Attributes:
        name: Package name, unique within one output collection.
        version: Full pacman version (``epoch:pkgver-pkgrel``).
        description: One-line description.
        repository: Repository name; ``"local"`` for installed packages
            that come from no known repository.
        architecture: Target architecture (``x86_64``, ``any``, ...).
        url: Upstream URL.
        licenses: License identifiers.
        groups: Package groups.
        provides: Virtual packages provided.
        depends: Mandatory dependency specifiers, catalog order.
        optional_depends: Optional dependency specifiers, each possibly
            followed by ``": reason"``.
        make_depends: Build-time dependency specifiers.
        check_depends: Test-suite dependency specifiers.
        required_by: Names of packages depending on this one.
        optional_for: Names of packages optionally depending on this one.
        required_by_make: Names of packages needing this one to build.
        required_by_check: Names of packages needing this one to run
            their test suite.
        conflicts: Conflicting package specifiers.
        replaces: Replaced package specifiers.
        download_size: Compressed package size in bytes.
        installed_size: Installed size in bytes.
        packager: Builder identity, usually ``Name <email>``.
        build_date: Build timestamp (seconds since the epoch).
        install_date: Install timestamp, local packages only.
        install_reason: Explicit or dependency, local packages only.
        install_script: Whether the package ships an install scriptlet.
        md5_sum: MD5 checksum of the package file.
        sha256_sum: SHA-256 checksum of the package file.
        signature: Base64 package signature, sync packages only.
    """

    name: str
    version: str = ""
    description: Optional[str] = None
    repository: str = ""
    architecture: Optional[str] = None
    url: Optional[str] = None
    licenses: Tuple[str, ...] = ()
    groups: Tuple[str, ...] = ()
    provides: Tuple[str, ...] = ()
    depends: Tuple[str, ...] = ()
    optional_depends: Tuple[str, ...] = ()
    make_depends: Tuple[str, ...] = ()
    check_depends: Tuple[str, ...] = ()
    required_by: Tuple[str, ...] = ()
    optional_for: Tuple[str, ...] = ()
    required_by_make: Tuple[str, ...] = ()
    required_by_check: Tuple[str, ...] = ()
    conflicts: Tuple[str, ...] = ()
    replaces: Tuple[str, ...] = ()
    download_size: int = 0
    installed_size: int = 0
    packager: Optional[str] = None
    build_date: int = 0
    install_date: Optional[int] = None
    install_reason: Optional[InstallReason] = None
    install_script: bool = False
    md5_sum: Optional[str] = None
    sha256_sum: Optional[str] = None
    signature: Optional[str] = None

    @classmethod
    def stub(cls, name: str) -> "PackageRecord":
        """Return a record that knows nothing but the name."""
        return cls(name=name)

    def with_reverse_deps(
        self,
        required_by: Iterable[str],
        optional_for: Iterable[str],
        required_by_make: Iterable[str] = (),
        required_by_check: Iterable[str] = (),
    ) -> "PackageRecord":
        """Fill each reverse dependency field this record leaves empty."""
        return replace(
            self,
            required_by=self.required_by or tuple(sorted(required_by)),
            optional_for=self.optional_for or tuple(sorted(optional_for)),
            required_by_make=self.required_by_make or tuple(sorted(required_by_make)),
            required_by_check=self.required_by_check or tuple(sorted(required_by_check)),
        )

    def to_json(self) -> Dict[str, Any]:
        """Serialize every field to a JSON-compatible dictionary."""
        entry: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            elif isinstance(value, Enum):
                value = value.value
            entry[f.name] = value
        return entry

    def to_summary(self) -> Dict[str, str]:
        """Return the ``{name, version}`` projection."""
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True)
class RawSourceRecord:
    """A :class:`PackageRecord` as read from a single database.

    Attributes:
        source: Which database produced the record.
        record: The record itself.
    """

    source: Source
    record: PackageRecord

    @property
    def name(self) -> str:
        return self.record.name

    @classmethod
    def local(cls, record: PackageRecord) -> "RawSourceRecord":
        return cls(Source.LOCAL, record)

    @classmethod
    def sync(cls, record: PackageRecord) -> "RawSourceRecord":
        return cls(Source.SYNC, record)


@dataclass(frozen=True)
class MergedRecord:
    """The single output record of one package name.

    Attributes:
        record: The reconciled field values.
        sources: Databases that contributed at least one field. Empty for
            a stub built for a name no database knows.
    """

    record: PackageRecord
    sources: FrozenSet[Source] = field(default_factory=frozenset)

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def resolved(self) -> bool:
        """False for a stub of a name found in no database."""
        return bool(self.sources)

    def to_json(self) -> Dict[str, Any]:
        return self.record.to_json()

    def to_summary(self) -> Dict[str, str]:
        return self.record.to_summary()


# ---------------------------------------------------------------------------
# Merge policy
# ---------------------------------------------------------------------------

# Values that mean "this source does not know" for a given field
_PLACEHOLDERS: Dict[str, Any] = {"repository": LOCAL_REPOSITORY}

# Never filled from the sync side; False is a real answer
_NEVER_FILLED = frozenset({"name", "install_script"})


def _is_empty(field_name: str, value: Any) -> bool:
    """Return True if ``value`` carries no information for ``field_name``."""
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (str, tuple)) and not value:
        return True
    if isinstance(value, int) and value == 0:
        return True
    return field_name in _PLACEHOLDERS and value == _PLACEHOLDERS[field_name]


def merge_records(local: PackageRecord, sync: PackageRecord) -> PackageRecord:
    """Fill the gaps of a local record from a sync record.

    Every field populated locally is kept, since it describes what is
    actually installed. Every field that is empty locally takes the sync
    value.

    Args:
        local: Record from the local database.
        sync: Record of the same name from a sync database.

    Returns:
        A new :class:`PackageRecord`; neither input is modified.

    Example::

        >>> local = PackageRecord("bash", version="5.2-1", installed_size=9)
        >>> sync = PackageRecord("bash", version="5.2-2", description="shell")
        >>> merged = merge_records(local, sync)
        >>> merged.version, merged.description, merged.installed_size
        ('5.2-1', 'shell', 9)
    """
    updates: Dict[str, Any] = {}
    for f in fields(local):
        if f.name in _NEVER_FILLED:
            continue
        local_value = getattr(local, f.name)
        if not _is_empty(f.name, local_value):
            continue
        sync_value = getattr(sync, f.name)
        if not _is_empty(f.name, sync_value):
            updates[f.name] = sync_value
    return replace(local, **updates) if updates else local


def merge_sources(
    name: str,
    local: Optional[RawSourceRecord],
    sync: Optional[RawSourceRecord],
    *,
    enrich: bool = True,
) -> MergedRecord:
    """Build the output record of ``name`` from its local and sync views.

    Plain mode (``enrich=False``) takes the local record if there is one,
    else the sync record. Enriched mode starts from the local record and
    fills its empty fields from the sync record. Either way a name unknown
    to both databases yields a stub instead of an error.

    Args:
        name: Package name being merged.
        local: Local view, or ``None``.
        sync: Sync view, or ``None``.
        enrich: Whether to combine both views.

    Returns:
        The :class:`MergedRecord` for ``name``.
    """
    if local is None and sync is None:
        return MergedRecord(PackageRecord.stub(name))

    if local is None:
        return MergedRecord(sync.record, frozenset({Source.SYNC}))

    if sync is None or not enrich:
        return MergedRecord(local.record, frozenset({Source.LOCAL}))

    merged = merge_records(local.record, sync.record)
    sources = {Source.LOCAL}
    if merged != local.record:
        sources.add(Source.SYNC)
    return MergedRecord(merged, frozenset(sources))
