"""
Unified data model exports for pacjump.

Example:
    >>> from pacjump.models import PackageRecord, merge_sources
"""

from __future__ import annotations

from pacjump.models.dependency import DependencySpec, bare_name, parse_dependency
from pacjump.models.record import (
    InstallReason,
    MergedRecord,
    PackageRecord,
    RawSourceRecord,
    Source,
    merge_records,
    merge_sources,
)

__all__ = [
    "DependencySpec",
    "InstallReason",
    "MergedRecord",
    "PackageRecord",
    "RawSourceRecord",
    "Source",
    "bare_name",
    "merge_records",
    "merge_sources",
    "parse_dependency",
]
