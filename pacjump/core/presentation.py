"""Output shapes for pacjump reports.

Two projections exist: the full record (every field) and the summary
(``{"name", "version"}`` only, for piping into other tools). Either way
the whole collection becomes a single JSON array.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from pacjump.models.record import MergedRecord

__all__ = ["render", "to_json"]


def render(records: Iterable[MergedRecord], *, summary: bool = False) -> List[Dict[str, Any]]:
    """Project records to JSON-compatible dictionaries, keeping order."""
    if summary:
        return [record.to_summary() for record in records]
    return [record.to_json() for record in records]


def to_json(
    records: Iterable[MergedRecord],
    *,
    summary: bool = False,
    indent: Optional[int] = None,
) -> str:
    """Serialize records into one JSON document.

    An empty collection yields ``[]``.
    """
    return json.dumps(render(records, summary=summary), indent=indent, ensure_ascii=False)
