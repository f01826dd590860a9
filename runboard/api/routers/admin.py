"""Password-protected maintenance endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from ...core.errors import ValidationError
from ...services import Services
from ..deps import get_services, require_admin

router = APIRouter(prefix="/api", tags=["admin"], dependencies=[Depends(require_admin)])

DEFAULT_MOCK_COUNT = 30
MAX_MOCK_COUNT = 1000


@router.post("/replace-name")
def replace_name(body: Dict[str, Any], services: Services = Depends(get_services)):
    """Rename a player; ``success`` is false when no row carried the old name."""

    find_name = body.get("findName")
    new_name = body.get("replaceName")
    if not isinstance(find_name, str) or not isinstance(new_name, str):
        raise ValidationError("findName and replaceName are required")

    rows = services.store.rename(find_name, new_name)
    if rows == 0:
        return {
            "success": False,
            "rowsAffected": 0,
            "message": f'No entries named "{find_name}" found',
        }
    return {
        "success": True,
        "rowsAffected": rows,
        "message": f'Renamed "{find_name}" to "{new_name.strip()}" ({rows} entries)',
    }


@router.delete("/clear-table")
def clear_table(body: Dict[str, Any], services: Services = Depends(get_services)):
    """Delete every row of a table."""

    table_name = body.get("tableName")
    if not isinstance(table_name, str) or not table_name.strip():
        raise ValidationError("tableName is required")

    deleted = services.store.clear(table_name)
    return {
        "success": True,
        "rowsDeleted": deleted,
        "message": f"Table {table_name.strip()} cleared",
    }


@router.post("/load-mock-data")
def load_mock_data(
    body: Optional[Dict[str, Any]] = Body(default=None),
    services: Services = Depends(get_services),
):
    """Insert a batch of generated results."""

    count = (body or {}).get("count", DEFAULT_MOCK_COUNT)
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValidationError("count must be an integer")
    if not 1 <= count <= MAX_MOCK_COUNT:
        raise ValidationError(f"count must be between 1 and {MAX_MOCK_COUNT}")

    ids = services.store.load_synthetic(count)
    return {"success": True, "inserted": len(ids), "message": f"{len(ids)} mock entries added"}


@router.post("/restore-db")
def restore_db(services: Services = Depends(get_services)):
    """Replace the live database with the latest snapshot."""

    services.backups.restore()
    return {"success": True, "message": "Database restored from backup"}


@router.post("/backup-db")
def backup_db(services: Services = Depends(get_services)):
    """Take a snapshot right now."""

    services.backups.snapshot()
    return {"success": True, "message": "Backup written", **services.backups.status()}


@router.post("/backup-service/start")
async def start_backup_service(services: Services = Depends(get_services)):
    await services.backups.start()
    return {"success": True, "message": "Backup service started", **services.backups.status()}


@router.post("/backup-service/stop")
async def stop_backup_service(services: Services = Depends(get_services)):
    await services.backups.stop()
    return {"success": True, "message": "Backup service stopped", **services.backups.status()}


@router.get("/backup-service/status")
def backup_service_status(services: Services = Depends(get_services)):
    return {"success": True, **services.backups.status()}


@router.get("/submissions-lock/status")
def submissions_lock_status(services: Services = Depends(get_services)):
    return {"success": True, "locked": services.submission_lock.is_locked()}


@router.post("/submissions-lock/set")
def set_submissions_lock(body: Dict[str, Any], services: Services = Depends(get_services)):
    locked = body.get("locked")
    if not isinstance(locked, bool):
        raise ValidationError("locked must be true or false")

    previous = services.submission_lock.set_locked(locked)
    return {
        "success": True,
        "locked": locked,
        "previous": previous,
        "message": "Submissions locked" if locked else "Submissions unlocked",
    }


__all__ = ["router"]
