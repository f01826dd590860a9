"""Database model exports."""

from .game_progress import (
    RANKED_VIEW,
    RANKED_VIEW_DDL,
    GameProgress,
    rank_key,
    ranked_order,
)

__all__ = [
    "GameProgress",
    "RANKED_VIEW",
    "RANKED_VIEW_DDL",
    "rank_key",
    "ranked_order",
]
