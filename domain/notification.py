"""
Domain: Notification outcomes.

A notification has two independent channels (email and SMS). Each channel
reports exactly one ChannelResult; failures are recorded here instead of
being raised to the spin request.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChannelStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    NOT_CONFIGURED = "not-configured"


@dataclass(frozen=True, slots=True)
class ChannelResult:
    """
    Result of one channel attempt.

    provider: identifier of the provider that delivered (or last failed)
    detail: provider message id on success, error detail on failure
    """

    status: ChannelStatus
    provider: Optional[str] = None
    detail: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.status is ChannelStatus.SENT


@dataclass(frozen=True, slots=True)
class NotificationOutcome:
    email: ChannelResult
    sms: ChannelResult

    @property
    def any_delivered(self) -> bool:
        return self.email.delivered or self.sms.delivered
