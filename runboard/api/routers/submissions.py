"""Game result ingestion endpoint."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request

from ...services import Services
from ..deps import client_key, get_services

router = APIRouter(prefix="/api", tags=["submissions"])


@router.post("/data")
def submit_game_data(
    request: Request,
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
):
    """Accept one finished run from a game client."""

    record = services.ingestion.submit(body, client_key(request))
    return {"success": True, "message": "Data received", "id": record.id}


__all__ = ["router"]
