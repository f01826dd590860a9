"""Periodic snapshots of the store file and restore from the latest one."""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.database import Database
from ..core.errors import SchedulerStateError, StorageError
from ..core.time import utcnow

logger = logging.getLogger(__name__)


class BackupState(str, enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class BackupScheduler:
    """Copies the live database to ``backup_path`` every ``interval_seconds``.

    ``start`` takes one snapshot immediately and only reports running once
    it succeeded. Failed scheduled snapshots are logged and retried on the
    next tick. Once ``stop`` returns no further snapshot is written.
    """

    def __init__(
        self, database: Database, backup_path: Path, interval_seconds: float = 300
    ) -> None:
        self.database = database
        self.backup_path = Path(backup_path)
        self.interval_seconds = interval_seconds
        self.last_backup_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self._running = False
        self._starting = False
        self._task: Optional[asyncio.Task] = None
        # Held while a scheduled snapshot runs; ``stop`` waits on it.
        self._tick_lock = threading.Lock()

    @property
    def state(self) -> BackupState:
        return BackupState.RUNNING if self._running else BackupState.STOPPED

    def snapshot(self) -> None:
        """Write a snapshot now, regardless of the schedule."""

        try:
            self.database.snapshot(self.backup_path)
        except StorageError as exc:
            self.last_error = exc.message
            raise
        self.last_backup_at = utcnow()
        self.last_error = None

    def restore(self) -> None:
        """Replace the live database with the latest snapshot."""

        self.database.restore(self.backup_path)

    async def start(self) -> None:
        if self._running or self._starting:
            raise SchedulerStateError("Backup service is already running")

        self._starting = True
        try:
            await asyncio.to_thread(self.snapshot)
            self._running = True
            self._task = asyncio.create_task(self._run(), name="backup-scheduler")
        finally:
            self._starting = False
        logger.info(
            "Backup service started, snapshot every %s seconds to %s",
            self.interval_seconds,
            self.backup_path,
        )

    async def stop(self) -> None:
        if not self._running:
            raise SchedulerStateError("Backup service is not running")

        await asyncio.to_thread(self._mark_stopped)
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("Backup service stopped")

    def _mark_stopped(self) -> None:
        with self._tick_lock:
            self._running = False

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await asyncio.to_thread(self._scheduled_snapshot)

    def _scheduled_snapshot(self) -> None:
        with self._tick_lock:
            if not self._running:
                return
            try:
                self.snapshot()
            except Exception:
                logger.exception(
                    "Scheduled backup failed, retrying in %s seconds", self.interval_seconds
                )

    def status(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "running": self._running,
            "intervalSeconds": self.interval_seconds,
            "backupPath": str(self.backup_path),
            "backupExists": self.backup_path.is_file(),
            "lastBackupAt": (
                self.last_backup_at.isoformat() if self.last_backup_at else None
            ),
            "lastError": self.last_error,
        }


__all__ = ["BackupScheduler", "BackupState"]
