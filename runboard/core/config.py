"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# Deployment mode ------------------------------------------------------------
RUNBOARD_ENV = os.getenv("RUNBOARD_ENV", "development").strip().lower()
IS_PRODUCTION = RUNBOARD_ENV == "production"

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_default_data_dir = Path("/data") if IS_PRODUCTION else _PROJECT_ROOT / "data"

DATA_DIR = Path(os.getenv("DATA_DIR") or _default_data_dir)
DATABASE_PATH = Path(os.getenv("DATABASE_PATH") or DATA_DIR / "gamedata.db")
BACKUP_PATH = Path(os.getenv("BACKUP_PATH") or DATA_DIR / "gamedata.backup.db")


# Ingestion guards -----------------------------------------------------------
RATE_LIMIT_MAX_REQUESTS = _env_int("RATE_LIMIT_MAX_REQUESTS", 1)
RATE_LIMIT_WINDOW_SECONDS = _env_int("RATE_LIMIT_WINDOW_SECONDS", 20)


# Maintenance ----------------------------------------------------------------
BACKUP_INTERVAL_SECONDS = _env_int("BACKUP_INTERVAL_SECONDS", 5 * 60)
BACKUP_AUTOSTART = _env_bool("BACKUP_AUTOSTART", False)
PROTECTED_TABLES = frozenset(_unique(_split_csv(os.getenv("PROTECTED_TABLES"))))
DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Europe/Berlin")


# Runtime behaviour ----------------------------------------------------------
ALLOWED_CORS_ORIGINS = _unique(_split_csv(os.getenv("ALLOWED_CORS_ORIGINS", "*")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _env_int("PORT", 3000)


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
]
