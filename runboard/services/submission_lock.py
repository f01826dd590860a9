"""Process-wide switch that blocks new submissions."""

from __future__ import annotations

import threading


class SubmissionLock:
    """In-memory flag; starts unlocked and is never persisted."""

    def __init__(self, locked: bool = False) -> None:
        self._locked = locked
        self._mutex = threading.Lock()

    def is_locked(self) -> bool:
        return self._locked

    def set_locked(self, locked: bool) -> bool:
        """Set the flag and return its previous value."""

        with self._mutex:
            previous, self._locked = self._locked, bool(locked)
        return previous


__all__ = ["SubmissionLock"]
