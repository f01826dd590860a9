"""Helpers for presenting stored results."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..core.time import time_of_day
from ..models import GameProgress


def record_to_dict(record: GameProgress, rank: Optional[int] = None) -> Dict[str, Any]:
    """Serialise a stored result to an API-friendly dict."""

    return {
        "id": record.id,
        "rank": rank,
        "name": record.name,
        "level": record.level,
        "function_details": record.function_details,
        "total_functions": record.total_functions,
        "completion_time_ms": record.completion_time_ms,
        "completion_time_formatted": record.completion_time_formatted,
        "timestamp": record.timestamp,
        "time_of_day": time_of_day(record.timestamp),
    }


def ranked_rows(records: Sequence[GameProgress], search: str = "") -> List[Dict[str, Any]]:
    """Number ranked records from 1, then keep those whose name contains ``search``.

    Filtering happens after ranking so a match keeps its overall position.
    """

    term = (search or "").strip().casefold()
    return [
        record_to_dict(record, rank=position)
        for position, record in enumerate(records, start=1)
        if not term or term in record.name.casefold()
    ]


__all__ = ["ranked_rows", "record_to_dict"]
