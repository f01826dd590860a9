"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    BACKUP_AUTOSTART,
    BACKUP_INTERVAL_SECONDS,
    BACKUP_PATH,
    DATABASE_PATH,
    DATA_DIR,
    DISPLAY_TIMEZONE,
    HOST,
    IS_PRODUCTION,
    LOG_LEVEL,
    PORT,
    PROTECTED_TABLES,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
    RUNBOARD_ENV,
)
from .logs import configure_logging
from .time import utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "BACKUP_AUTOSTART",
    "BACKUP_INTERVAL_SECONDS",
    "BACKUP_PATH",
    "DATABASE_PATH",
    "DATA_DIR",
    "DISPLAY_TIMEZONE",
    "HOST",
    "IS_PRODUCTION",
    "LOG_LEVEL",
    "PORT",
    "PROTECTED_TABLES",
    "RATE_LIMIT_MAX_REQUESTS",
    "RATE_LIMIT_WINDOW_SECONDS",
    "RUNBOARD_ENV",
    "configure_logging",
    "utcnow",
]
