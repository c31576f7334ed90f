"""
pacjump: dump pacman package information as JSON

pacjump reads the local pacman database (installed packages) and the sync
databases (repository snapshots), reconciles both views into one record
per package, and prints the result as a single JSON document.

Features include:
    • Explicitly installed, all installed, or whole-catalog listings
    • Field-by-field enrichment of local records from the sync catalog
    • Breadth-first dependency closure of a single package
    • Reverse dependency annotation (required by / optional for)
    • Compact name + version summaries for piping
"""

from __future__ import annotations

from pacjump.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "pacjump Contributors"
__license__ = "GPL-3.0-only"
__url__ = "https://github.com/bryango/pacman-json"
__description__ = "Dump pacman packages information in JSON."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
]
