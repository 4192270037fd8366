"""
Domain: Error taxonomy.

Only ValidationError and DuplicateParticipantError are user-facing outcomes.
Storage read failures are recovered inside the store, storage write failures
become internal errors, and notification failures are always recovered by the
dispatcher.
"""

from __future__ import annotations

from typing import Sequence


class SpinWheelError(Exception):
    """Base class for all spin wheel errors."""


class ValidationError(SpinWheelError):
    """Raised when required spin request fields are missing or empty."""

    def __init__(self, missing_fields: Sequence[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Missing required fields: {', '.join(self.missing_fields)}")


class DuplicateParticipantError(SpinWheelError):
    """Raised when the email already has a spin record."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Participant already spun: {email}")


class StorageReadError(SpinWheelError):
    """Raised when the record file cannot be read or parsed."""


class StorageWriteError(SpinWheelError):
    """Raised when the record file cannot be written."""


class NotificationError(SpinWheelError):
    """Raised by a notification provider when a send attempt fails."""

    def __init__(self, channel: str, provider: str, detail: str):
        self.channel = channel
        self.provider = provider
        self.detail = detail
        super().__init__(f"{channel} via {provider} failed: {detail}")
