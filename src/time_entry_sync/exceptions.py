"""Typed exceptions for time entry synchronization.

    SyncError (base)
    |
    +-- FetchError            network failure loading entries, projects or tasks
    |   +-- AuthenticationError
    |
    +-- ItemError             a single create/delete failed inside a transaction
    |
    +-- PreconditionError     rejected before any network effect
"""

from typing import Any


class SyncError(Exception):
    """Base class for all synchronization errors."""

    code: str = "SYNC_ERROR"


class FetchError(SyncError):
    """Retrieving entries, projects, or tasks from a service failed."""

    code = "FETCH_ERROR"

    def __init__(self, message: str, service: str | None = None) -> None:
        self.service = service
        super().__init__(message)


class AuthenticationError(FetchError):
    """A service rejected the credentials or was never authenticated."""

    code = "AUTHENTICATION_ERROR"


class ItemError(SyncError):
    """Creating or deleting a single entry failed."""

    code = "ITEM_ERROR"

    def __init__(self, message: str, entry_id: str | None = None) -> None:
        self.entry_id = entry_id
        super().__init__(message)


class PreconditionError(SyncError):
    """An operation was requested in a state that does not allow it."""

    code = "PRECONDITION_ERROR"

    def __init__(self, message: str, **details: Any) -> None:
        self.details = details
        super().__init__(message)
