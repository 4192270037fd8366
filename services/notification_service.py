"""
Notification dispatcher for admitted spins.

Fans a coupon notice out to two independent channels, email first and then
SMS. Both channels are always attempted; a failure in one never prevents the
other, and no failure is propagated to the caller. Outcomes are reported as
NotificationOutcome metadata and logged.
"""

from __future__ import annotations

import logging

from domain.errors import NotificationError
from domain.notification import ChannelResult, ChannelStatus, NotificationOutcome
from domain.spin import SpinRecord
from services.email_service import PROVIDER_NAME as EMAIL_PROVIDER
from services.email_service import EmailService
from services.sms_service import SmsService

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """
    Best-effort, fire-and-forget delivery of the coupon notice.

    Calls are made sequentially and are not retried.
    """

    def __init__(self, email_service: EmailService, sms_service: SmsService):
        self._email = email_service
        self._sms = sms_service

    def notify(self, record: SpinRecord) -> NotificationOutcome:
        """Send the coupon by email and SMS. Never raises."""
        email_result = self._notify_email(record)
        sms_result = self._notify_sms(record)

        outcome = NotificationOutcome(email=email_result, sms=sms_result)
        logger.info(
            f"Notification outcome for spin {record.id}: "
            f"email={email_result.status.value} sms={sms_result.status.value}",
            extra={
                "spin_id": record.id,
                "email_status": email_result.status.value,
                "sms_status": sms_result.status.value,
                "sms_provider": sms_result.provider,
            },
        )
        return outcome

    def _notify_email(self, record: SpinRecord) -> ChannelResult:
        if not self._email.configured:
            logger.warning("Resend not configured - skipping email")
            return ChannelResult(status=ChannelStatus.NOT_CONFIGURED)

        try:
            email_id = self._email.send_coupon_email(record)
        except NotificationError as e:
            logger.error(
                f"Email error: {e}",
                extra={"spin_id": record.id, "provider": e.provider, "error": e.detail},
            )
            return ChannelResult(status=ChannelStatus.FAILED, provider=e.provider, detail=e.detail)
        except Exception as e:
            logger.exception("Unexpected email error", extra={"spin_id": record.id})
            return ChannelResult(status=ChannelStatus.FAILED, provider=EMAIL_PROVIDER, detail=str(e))

        return ChannelResult(status=ChannelStatus.SENT, provider=EMAIL_PROVIDER, detail=email_id)

    def _notify_sms(self, record: SpinRecord) -> ChannelResult:
        try:
            return self._sms.send_coupon_sms(record)
        except Exception as e:
            logger.exception("Unexpected SMS error", extra={"spin_id": record.id})
            return ChannelResult(status=ChannelStatus.FAILED, detail=str(e))


__all__ = ["NotificationDispatcher"]
