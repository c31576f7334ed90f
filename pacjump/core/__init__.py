"""
Core functionality exports for pacjump.

Importing from here keeps user-facing imports clean and stable:

    from pacjump.core import ClosureResolver, ReportBuilder

The pyalpm backend is not re-exported so that importing the core does not
require libalpm.
"""

from __future__ import annotations

from pacjump.core.database import PackageDatabase
from pacjump.core.presentation import render, to_json
from pacjump.core.resolver import Closure, ClosureResolver
from pacjump.core.reverse_deps import ReverseDeps, ReverseDepsIndex
from pacjump.core.report import (
    AllInstalled,
    ClosureOf,
    ExplicitlyInstalled,
    Mode,
    ReportBuilder,
)

__all__ = [
    "AllInstalled",
    "Closure",
    "ClosureOf",
    "ClosureResolver",
    "ExplicitlyInstalled",
    "Mode",
    "PackageDatabase",
    "ReportBuilder",
    "ReverseDeps",
    "ReverseDepsIndex",
    "render",
    "to_json",
]
