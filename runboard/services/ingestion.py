"""Acceptance pipeline for ``POST /api/data``."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..core.errors import Locked, RateLimited
from ..models import GameProgress
from .rate_limiter import RateLimiter
from .store import SubmissionStore
from .submission_lock import SubmissionLock
from .submissions import parse_submission

logger = logging.getLogger(__name__)


class IngestionService:
    """Lock check, rate limit, validation, then a uniqueness-checked insert."""

    def __init__(
        self, store: SubmissionStore, limiter: RateLimiter, lock: SubmissionLock
    ) -> None:
        self.store = store
        self.limiter = limiter
        self.lock = lock

    def submit(self, body: Mapping[str, Any], source_key: str) -> GameProgress:
        if self.lock.is_locked():
            logger.info("Rejected submission from %s: locked", source_key)
            raise Locked()

        admission = self.limiter.admit(source_key)
        if not admission.allowed:
            logger.info(
                "Rejected submission from %s: rate limited for %ss",
                source_key,
                admission.retry_after,
            )
            raise RateLimited(admission.retry_after)

        submission = parse_submission(body)
        return self.store.insert(submission)


__all__ = ["IngestionService"]
