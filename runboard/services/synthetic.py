"""Generator for mock leaderboard data."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from typing import AbstractSet, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.config import DISPLAY_TIMEZONE
from ..core.time import format_display_timestamp, format_duration, utcnow
from .submissions import Submission, name_key

logger = logging.getLogger(__name__)

PLAYER_NAMES = (
    "Alex", "Ben", "Clara", "David", "Emma", "Finn", "Greta", "Hannah",
    "Ida", "Jonas", "Klara", "Leon", "Mia", "Noah", "Olivia", "Paul",
    "Quentin", "Rosa", "Sophie", "Tim", "Ulla", "Vincent", "Wanda", "Yusuf",
)
FUNCTION_NAMES = (
    "moveForward", "turnLeft", "turnRight", "jump",
    "pickUp", "putDown", "repeat", "ifWall",
)

MIN_LEVEL, MAX_LEVEL = 1, 10
MIN_CALLS, MAX_CALLS = 1, 8
MIN_TIME_MS, MAX_TIME_MS = 30_000, 30 * 60_000
TIMESTAMP_SPREAD = timedelta(days=7)


def _display_zone():
    try:
        return ZoneInfo(DISPLAY_TIMEZONE)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown timezone %r, using UTC", DISPLAY_TIMEZONE)
        return None


def _player_name(rng: random.Random, taken: set) -> str:
    while True:
        name = f"{rng.choice(PLAYER_NAMES)}{rng.randint(1, 9999)}"
        if name_key(name) not in taken:
            taken.add(name_key(name))
            return name


def generate_submissions(
    count: int,
    *,
    taken: AbstractSet[str] = frozenset(),
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[Submission]:
    """Build ``count`` schema-valid results whose names avoid ``taken`` keys."""

    rng = rng or random.Random()
    now = now or utcnow()
    zone = _display_zone()
    used = set(taken)

    batch: List[Submission] = []
    for _ in range(count):
        functions = rng.sample(FUNCTION_NAMES, rng.randint(2, len(FUNCTION_NAMES)))
        details = {fn: rng.randint(MIN_CALLS, MAX_CALLS) for fn in functions}
        elapsed_ms = rng.randint(MIN_TIME_MS, MAX_TIME_MS)
        moment = now - timedelta(
            seconds=rng.uniform(0, TIMESTAMP_SPREAD.total_seconds())
        )
        if zone is not None:
            moment = moment.astimezone(zone)

        batch.append(
            Submission(
                name=_player_name(rng, used),
                level=rng.randint(MIN_LEVEL, MAX_LEVEL),
                function_details=details,
                total_functions=sum(details.values()),
                completion_time_ms=elapsed_ms,
                completion_time_formatted=format_duration(elapsed_ms),
                timestamp=format_display_timestamp(moment),
            )
        )
    return batch


__all__ = ["FUNCTION_NAMES", "PLAYER_NAMES", "generate_submissions"]
