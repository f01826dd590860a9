"""Validation of inbound game results."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..core.errors import ValidationError
from ..models import GameProgress

# SQLite INTEGER is a signed 64-bit value.
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1

REQUIRED_FIELDS = (
    "name",
    "level",
    "functionDetails",
    "totalFunctions",
    "completionTimeMs",
    "completionTimeFormatted",
    "timestamp",
)


def name_key(name: str) -> str:
    """Key used for case-insensitive name uniqueness."""

    return name.casefold()


@dataclass(frozen=True)
class Submission:
    """A validated game result that has not been stored yet."""

    name: str
    level: int
    function_details: Dict[str, Any]
    total_functions: int
    completion_time_ms: int
    completion_time_formatted: str
    timestamp: str

    @property
    def name_key(self) -> str:
        return name_key(self.name)

    def to_model(self) -> GameProgress:
        return GameProgress(
            name=self.name,
            name_key=self.name_key,
            level=self.level,
            function_details=json.dumps(self.function_details),
            total_functions=self.total_functions,
            completion_time_ms=self.completion_time_ms,
            completion_time_formatted=self.completion_time_formatted,
            timestamp=self.timestamp,
        )


def _as_int(body: Mapping[str, Any], field: str) -> int:
    value = _to_int(body, field)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValidationError(f"{field} is out of range")
    return value


def _to_int(body: Mapping[str, Any], field: str) -> int:
    value = body[field]
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field} must be an integer")


def _as_text(body: Mapping[str, Any], field: str) -> str:
    value = body[field]
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value


def _function_details(value: Any) -> Dict[str, Any]:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValidationError("functionDetails must be an object") from exc
    if not isinstance(value, dict):
        raise ValidationError("functionDetails must be an object")
    return value


def parse_submission(body: Mapping[str, Any]) -> Submission:
    """Validate a ``POST /api/data`` payload.

    ``totalFunctions`` and ``completionTimeFormatted`` are taken as sent;
    they are not recomputed from the other fields.
    """

    missing = [field for field in REQUIRED_FIELDS if body.get(field) is None]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    name = _as_text(body, "name").strip()
    if not name:
        raise ValidationError("name must not be empty")

    completion_time_ms = _as_int(body, "completionTimeMs")
    if completion_time_ms < 0:
        raise ValidationError("completionTimeMs must not be negative")

    return Submission(
        name=name,
        level=_as_int(body, "level"),
        function_details=_function_details(body["functionDetails"]),
        total_functions=_as_int(body, "totalFunctions"),
        completion_time_ms=completion_time_ms,
        completion_time_formatted=_as_text(body, "completionTimeFormatted"),
        timestamp=_as_text(body, "timestamp"),
    )


__all__ = ["REQUIRED_FIELDS", "Submission", "name_key", "parse_submission"]
