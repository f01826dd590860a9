"""Leaderboard endpoints."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ...services import Services, ranked_rows
from ..deps import get_services

router = APIRouter(prefix="/api", tags=["leaderboard"])


@router.get("/gamedata")
def get_game_data(
    search: str = "", services: Services = Depends(get_services)
) -> List[Dict[str, Any]]:
    """All results in leaderboard order, optionally filtered by name."""

    return ranked_rows(services.store.list_ranked(), search)


__all__ = ["router"]
