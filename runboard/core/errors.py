"""Service error taxonomy mapped onto HTTP status codes."""

from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    """Base class for errors that are reported back to API clients."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400


class DuplicateName(ServiceError):
    status_code = 400

    def __init__(self, name: str) -> None:
        super().__init__(f'The name "{name}" is already taken')
        self.name = name


class Locked(ServiceError):
    status_code = 423

    def __init__(self, message: str = "Submissions are currently locked") -> None:
        super().__init__(message)


class RateLimited(ServiceError):
    status_code = 429

    def __init__(self, retry_after: int) -> None:
        super().__init__(
            f"Too many submissions, retry in {retry_after} seconds"
        )
        self.retry_after = retry_after


class Forbidden(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class SchedulerStateError(ServiceError):
    """Start/stop requested in a state that does not allow it."""

    status_code = 409


class StorageError(ServiceError):
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        detail = f"{message}: {cause}" if cause is not None else message
        super().__init__(detail)
        self.cause = cause


__all__ = [
    "DuplicateName",
    "Forbidden",
    "Locked",
    "NotFound",
    "RateLimited",
    "SchedulerStateError",
    "ServiceError",
    "StorageError",
    "ValidationError",
]
