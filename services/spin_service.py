"""
Spin eligibility service.

Admits at most one spin per participant email and notifies the participant of
the coupon they won.

Process:
1. Validate that all required fields are present and non-empty
2. Check for a prior spin by the same email
3. Admit: create and persist a new SpinRecord
4. Dispatch email and SMS notifications (outcome never affects admission)

Steps 2-3 run under the repository lock so that concurrent requests for the
same email cannot both be admitted. The record write is not rolled back if
notification fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from domain.errors import DuplicateParticipantError, ValidationError
from domain.notification import NotificationOutcome
from domain.spin import SpinRecord
from domain.time import utc_now
from domain.wheel import find_segment
from repositories.spin_repository import SpinRepository
from services.notification_service import NotificationDispatcher

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields"
ALREADY_SPUN_MESSAGE = "You have already spun the wheel."
ACCEPTED_MESSAGE = "Coupon sent successfully!"
INTERNAL_ERROR_MESSAGE = "Internal server error"

REQUIRED_FIELDS = ("name", "email", "phone", "domain", "discount", "coupon_code")


class SpinOutcome(str, Enum):
    ACCEPTED = "accepted"
    MISSING_FIELDS = "missing-fields"
    ALREADY_PARTICIPATED = "already-participated"
    INTERNAL_ERROR = "internal-error"


@dataclass(frozen=True, slots=True)
class SpinRequest:
    """
    Spin request as submitted by the wheel client.

    Every field is optional here; presence is checked by the service so that
    missing fields become a rejection rather than a parse error.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    domain: Optional[str] = None
    discount: Optional[int] = None
    coupon_code: Optional[str] = None

    def missing_fields(self) -> List[str]:
        missing = []
        for field_name in REQUIRED_FIELDS:
            value = getattr(self, field_name)
            if value is None:
                missing.append(field_name)
            elif isinstance(value, str) and not value.strip():
                missing.append(field_name)
            elif field_name == "discount" and not value:
                missing.append(field_name)
        return missing


@dataclass(frozen=True, slots=True)
class SpinResult:
    """
    Terminal outcome of a spin request.

    allowed/success/message/coupon_code map directly onto the API response.
    record and notification are set only for accepted spins.
    """
    outcome: SpinOutcome
    allowed: bool
    success: bool
    message: str
    coupon_code: Optional[str] = None
    record: Optional[SpinRecord] = None
    notification: Optional[NotificationOutcome] = None


class SpinService:
    """The single-spin-per-email gate. The only writer of the spin repository."""

    def __init__(
        self,
        repository: SpinRepository,
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._repository = repository
        self._dispatcher = dispatcher
        self._clock = clock

    def spin(self, request: SpinRequest) -> SpinResult:
        """
        Run one spin request to a terminal outcome.

        Never raises: unexpected errors become an INTERNAL_ERROR result.

        Example:
            result = service.spin(SpinRequest(
                name="Asha",
                email="asha@example.com",
                phone="+91 98765 43210",
                domain="Websites",
                discount=10,
                coupon_code="ZTX-WEB10",
            ))
            if result.allowed:
                print(f"Admitted as spin {result.record.id}")
        """
        logger.info(
            "Received spin request",
            extra={"email": request.email, "domain": request.domain, "coupon_code": request.coupon_code},
        )

        try:
            self._validate(request)
            record = self._admit(request)
            notification = self._dispatcher.notify(record)
        except ValidationError as e:
            logger.info(f"Spin rejected: {e}")
            return SpinResult(
                outcome=SpinOutcome.MISSING_FIELDS,
                allowed=False,
                success=False,
                message=MISSING_FIELDS_MESSAGE,
            )
        except DuplicateParticipantError as e:
            logger.info(f"Spin rejected: {e}")
            return SpinResult(
                outcome=SpinOutcome.ALREADY_PARTICIPATED,
                allowed=False,
                success=False,
                message=ALREADY_SPUN_MESSAGE,
            )
        except Exception:
            logger.exception("Error processing spin request", extra={"email": request.email})
            return SpinResult(
                outcome=SpinOutcome.INTERNAL_ERROR,
                allowed=False,
                success=False,
                message=INTERNAL_ERROR_MESSAGE,
            )

        return SpinResult(
            outcome=SpinOutcome.ACCEPTED,
            allowed=True,
            success=True,
            message=ACCEPTED_MESSAGE,
            coupon_code=record.coupon_code,
            record=record,
            notification=notification,
        )

    def _validate(self, request: SpinRequest) -> None:
        missing = request.missing_fields()
        if missing:
            raise ValidationError(missing)

        if find_segment(request.domain, request.discount, request.coupon_code) is None:
            # Caller-supplied segments are trusted; off-wheel values are only flagged.
            logger.warning(
                "Spin request does not match a wheel segment",
                extra={
                    "email": request.email,
                    "domain": request.domain,
                    "discount": request.discount,
                    "coupon_code": request.coupon_code,
                },
            )

    def _admit(self, request: SpinRequest) -> SpinRecord:
        with self._repository.locked():
            records = self._repository.load_all()

            if self._repository.find_by_email(request.email, records) is not None:
                raise DuplicateParticipantError(request.email)

            record = SpinRecord(
                id=self._repository.next_id(records),
                name=request.name,
                email=request.email,
                phone=request.phone,
                domain=request.domain,
                discount=int(request.discount),
                coupon_code=request.coupon_code,
                created_at=self._clock(),
            )
            self._repository.save_all([*records, record])

        logger.info(
            f"Spin admitted: id={record.id} coupon={record.coupon_code}",
            extra={"spin_id": record.id, "email": record.email},
        )
        return record


__all__ = [
    "SpinOutcome",
    "SpinRequest",
    "SpinResult",
    "SpinService",
    "ALREADY_SPUN_MESSAGE",
    "MISSING_FIELDS_MESSAGE",
]
