from __future__ import annotations

import time
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from runboard.app import create_app
from runboard.services import RateLimiter, Services, parse_submission

ADMIN = ("admin", "s3cret")


class FakeClock:
    """Stands in for ``time.time`` so rate-limit windows can be stepped through."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_payload(name: str = "Alice", **overrides: Any) -> Dict[str, Any]:
    payload = {
        "name": name,
        "level": 3,
        "functionDetails": {"moveForward": 4, "turnLeft": 2},
        "totalFunctions": 6,
        "completionTimeMs": 125_000,
        "completionTimeFormatted": "00:02:05",
        "timestamp": "17/10/2026, 14:03:12",
    }
    payload.update(overrides)
    return payload


def make_submission(name: str = "Alice", **overrides: Any):
    return parse_submission(make_payload(name, **overrides))


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(time, "time", fake)
    return fake


@pytest.fixture
def services(tmp_path):
    built = Services.build(
        tmp_path / "gamedata.db",
        tmp_path / "backup" / "gamedata.backup.db",
        limiter=RateLimiter(1, 20),
        backup_interval_seconds=300,
    )
    yield built
    built.database.close()


@pytest.fixture
def store(services):
    return services.store


@pytest.fixture
def client(services, monkeypatch):
    monkeypatch.setenv("ADMIN_USER", ADMIN[0])
    monkeypatch.setenv("ADMIN_PASS", ADMIN[1])
    with TestClient(create_app(services)) as test_client:
        yield test_client
