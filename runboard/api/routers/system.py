"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...core import IS_PRODUCTION, RUNBOARD_ENV
from ...services import Services
from ..deps import get_services

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness check."""

    return {"ok": True}


@router.get("/api/config")
def get_config(services: Services = Depends(get_services)) -> Dict[str, Any]:
    """Expose non-secret runtime settings to the frontend."""

    return {
        "environment": RUNBOARD_ENV,
        "production": IS_PRODUCTION,
        "rate_limit": {
            "max_requests": services.limiter.max_requests,
            "window_seconds": services.limiter.window_seconds,
        },
        "submissions_locked": services.submission_lock.is_locked(),
    }


__all__ = ["router"]
