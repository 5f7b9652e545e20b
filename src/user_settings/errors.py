"""Error taxonomy for the settings service.

Every error carries a user-facing message. Strawberry renders the message
as a GraphQL error; the original cause (if any) stays on ``__cause__`` so
structured logs can still report it.
"""

from __future__ import annotations


class SettingsServiceError(Exception):
    """Base class for errors surfaced to API callers."""


class UserNotFoundError(SettingsServiceError):
    """The referenced user does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class StorageError(SettingsServiceError):
    """The record store could not complete a read or write."""


class NotificationError(SettingsServiceError):
    """The audit sink rejected the event or could not be reached.

    Writes that happened before the notification are already committed when
    this is raised.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
