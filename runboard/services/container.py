"""Wiring of the stateful services owned by one app instance."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from ..core import config
from ..core.database import Database
from .backup import BackupScheduler
from .ingestion import IngestionService
from .rate_limiter import RateLimiter
from .store import SubmissionStore
from .submission_lock import SubmissionLock


@dataclass
class Services:
    database: Database
    store: SubmissionStore
    limiter: RateLimiter
    submission_lock: SubmissionLock
    backups: BackupScheduler
    ingestion: IngestionService
    backup_autostart: bool = False

    @classmethod
    def build(
        cls,
        database_path: Path,
        backup_path: Path,
        *,
        limiter: Optional[RateLimiter] = None,
        protected_tables: Iterable[str] = (),
        backup_interval_seconds: float = 300,
        backup_autostart: bool = False,
    ) -> "Services":
        database = Database(database_path)
        store = SubmissionStore(database, protected_tables)
        limiter = limiter or RateLimiter()
        submission_lock = SubmissionLock()
        return cls(
            database=database,
            store=store,
            limiter=limiter,
            submission_lock=submission_lock,
            backups=BackupScheduler(database, backup_path, backup_interval_seconds),
            ingestion=IngestionService(store, limiter, submission_lock),
            backup_autostart=backup_autostart,
        )

    @classmethod
    def from_settings(cls) -> "Services":
        return cls.build(
            config.DATABASE_PATH,
            config.BACKUP_PATH,
            limiter=RateLimiter(
                config.RATE_LIMIT_MAX_REQUESTS, config.RATE_LIMIT_WINDOW_SECONDS
            ),
            protected_tables=config.PROTECTED_TABLES,
            backup_interval_seconds=config.BACKUP_INTERVAL_SECONDS,
            backup_autostart=config.BACKUP_AUTOSTART,
        )


__all__ = ["Services"]
