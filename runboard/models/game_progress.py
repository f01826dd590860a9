"""Database model for submitted game runs and the leaderboard order."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import case
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import SENTINEL_TIME, utcnow


class GameProgress(SQLModel, table=True):
    """One accepted run result, as submitted by a game client."""

    __tablename__ = "game_progress"
    # AUTOINCREMENT: ids are never reused after deletes.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = ORMField(default=None, primary_key=True)
    name: str
    # Case-folded copy of ``name``; the unique index enforces case-insensitive uniqueness.
    name_key: str = ORMField(index=True, unique=True)
    level: int
    function_details: str
    total_functions: int
    completion_time_ms: int = ORMField(index=True)
    completion_time_formatted: str
    timestamp: str
    created_at: datetime = ORMField(default_factory=utcnow)


# Leaderboard order: sentinel times last, then fastest first, then oldest id first.
RANKED_VIEW = "ranked_game_progress"
RANKED_VIEW_DDL = f"""
CREATE VIEW IF NOT EXISTS {RANKED_VIEW} AS
SELECT * FROM game_progress
ORDER BY
    CASE WHEN completion_time_formatted = '{SENTINEL_TIME}' THEN 1 ELSE 0 END,
    completion_time_ms ASC,
    id ASC
"""


def ranked_order() -> tuple:
    """ORDER BY clauses equivalent to the ranked view."""

    return (
        case((GameProgress.completion_time_formatted == SENTINEL_TIME, 1), else_=0),
        GameProgress.completion_time_ms.asc(),
        GameProgress.id.asc(),
    )


def rank_key(record: GameProgress) -> Tuple[int, int, int]:
    """In-memory sort key producing the same order as :func:`ranked_order`."""

    return (
        1 if record.completion_time_formatted == SENTINEL_TIME else 0,
        record.completion_time_ms,
        record.id if record.id is not None else 0,
    )


__all__ = ["GameProgress", "RANKED_VIEW", "RANKED_VIEW_DDL", "rank_key", "ranked_order"]
