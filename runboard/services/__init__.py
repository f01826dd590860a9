"""Service layer helpers."""

from .backup import BackupScheduler, BackupState
from .container import Services
from .ingestion import IngestionService
from .rate_limiter import Admission, RateLimiter
from .records import ranked_rows, record_to_dict
from .store import TABLES, SubmissionStore
from .submission_lock import SubmissionLock
from .submissions import Submission, parse_submission
from .synthetic import generate_submissions

__all__ = [
    "Admission",
    "BackupScheduler",
    "BackupState",
    "IngestionService",
    "RateLimiter",
    "Services",
    "Submission",
    "SubmissionLock",
    "SubmissionStore",
    "TABLES",
    "generate_submissions",
    "parse_submission",
    "ranked_rows",
    "record_to_dict",
]
