"""
Coupon SMS service.

Sends the coupon SMS through an ordered cascade of SMS providers:

1. fast2sms - primary regional gateway (HTTP API)
2. msg91    - secondary regional gateway (HTTP flow API)
3. twilio   - international gateway (Twilio SDK)

Only providers with complete credentials take part. The first provider that
reports success wins; a failure or exception moves on to the next provider.
Nothing is retried.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

import httpx
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client as TwilioClient

from config.settings import Settings
from domain.errors import NotificationError
from domain.notification import ChannelResult, ChannelStatus
from domain.phone import COUNTRY_CODE, is_national_number, normalize_phone, to_dialable
from domain.spin import SpinRecord

logger = logging.getLogger(__name__)

CHANNEL = "sms"


def coupon_sms_message(record: SpinRecord) -> str:
    return (
        f"Hi {record.name}! You just won {record.discount}% off on {record.domain} with ZooTechX. "
        f"Your coupon code is {record.coupon_code}. Show this at the ZooTechX desk to redeem."
    )


class SmsProvider(ABC):
    """A single SMS gateway. Implementations raise NotificationError on failure."""

    name: str

    @abstractmethod
    def send(self, record: SpinRecord, message: str) -> Optional[str]:
        """Send the message, returning the provider's message/request id."""

    def _fail(self, detail: str) -> NotificationError:
        return NotificationError(CHANNEL, self.name, detail)


class _HttpSmsProvider(SmsProvider):
    """Shared plumbing for JSON-over-HTTP regional gateways."""

    URL: str

    def __init__(self, timeout: float, client: Optional[httpx.Client] = None):
        self.timeout = timeout
        self._client = client

    def _national_number(self, record: SpinRecord) -> str:
        if not is_national_number(record.phone):
            raise self._fail(f"not a {COUNTRY_CODE} national number: {record.phone!r}")
        return normalize_phone(record.phone)

    def _post(self, headers: dict[str, str], payload: dict[str, Any]) -> Any:
        try:
            if self._client is not None:
                response = self._client.post(self.URL, headers=headers, json=payload)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.URL, headers=headers, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise self._fail(f"HTTP {e.response.status_code}: {e.response.text[:200]}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise self._fail(str(e)) from e


class Fast2SmsProvider(_HttpSmsProvider):
    """Primary regional gateway (Fast2SMS bulk API, quick route)."""

    name = "fast2sms"
    URL = "https://www.fast2sms.com/dev/bulkV2"

    def __init__(self, api_key: str, timeout: float, client: Optional[httpx.Client] = None):
        super().__init__(timeout, client)
        self._api_key = api_key

    def send(self, record: SpinRecord, message: str) -> Optional[str]:
        number = self._national_number(record)
        body = self._post(
            headers={"authorization": self._api_key},
            payload={"route": "q", "message": message, "numbers": number, "flash": "0"},
        )
        if not body.get("return"):
            raise self._fail(f"rejected: {body.get('message')}")
        return body.get("request_id")


class Msg91Provider(_HttpSmsProvider):
    """
    Secondary regional gateway (MSG91 flow API).

    The DLT-approved template referenced by template_id must declare the
    variables name, discount, domain and coupon.
    """

    name = "msg91"
    URL = "https://control.msg91.com/api/v5/flow/"

    def __init__(
        self,
        auth_key: str,
        template_id: str,
        timeout: float,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(timeout, client)
        self._auth_key = auth_key
        self._template_id = template_id

    def send(self, record: SpinRecord, message: str) -> Optional[str]:
        number = self._national_number(record)
        body = self._post(
            headers={"authkey": self._auth_key, "accept": "application/json"},
            payload={
                "template_id": self._template_id,
                "short_url": "0",
                "recipients": [
                    {
                        "mobiles": f"{COUNTRY_CODE}{number}",
                        "name": record.name,
                        "discount": str(record.discount),
                        "domain": record.domain,
                        "coupon": record.coupon_code,
                    }
                ],
            },
        )
        if body.get("type") != "success":
            raise self._fail(f"rejected: {body.get('message')}")
        return body.get("message")


class TwilioProvider(SmsProvider):
    """International gateway; dials the number in +<country><number> form."""

    name = "twilio"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_phone: str,
        timeout: float,
        client: Optional[TwilioClient] = None,
    ):
        self._from_phone = from_phone
        self._client = client or TwilioClient(
            account_sid, auth_token, http_client=TwilioHttpClient(timeout=timeout)
        )

    def send(self, record: SpinRecord, message: str) -> Optional[str]:
        try:
            sent = self._client.messages.create(
                body=message,
                from_=self._from_phone,
                to=to_dialable(record.phone),
            )
        except Exception as e:
            raise self._fail(str(e)) from e
        return sent.sid


def build_sms_providers(settings: Settings) -> List[SmsProvider]:
    """Configured providers in cascade order. Unconfigured ones are skipped."""

    providers: List[SmsProvider] = []
    if settings.fast2sms_configured:
        providers.append(Fast2SmsProvider(settings.fast2sms_api_key, settings.notify_timeout_seconds))
    if settings.msg91_configured:
        providers.append(
            Msg91Provider(
                settings.msg91_auth_key,
                settings.msg91_template_id,
                settings.notify_timeout_seconds,
            )
        )
    if settings.twilio_configured:
        providers.append(
            TwilioProvider(
                settings.twilio_account_sid,
                settings.twilio_auth_token,
                settings.twilio_phone,
                settings.notify_timeout_seconds,
            )
        )
    return providers


class SmsService:
    """Runs the provider cascade for one coupon SMS."""

    def __init__(self, providers: Sequence[SmsProvider]):
        self.providers = list(providers)

    def send_coupon_sms(self, record: SpinRecord) -> ChannelResult:
        """
        Try each provider in order until one succeeds.

        Never raises: provider failures are logged and folded into the result.
        """
        if not self.providers:
            logger.warning("No SMS provider configured - skipping SMS")
            return ChannelResult(status=ChannelStatus.NOT_CONFIGURED)

        message = coupon_sms_message(record)
        last_error: Optional[str] = None
        last_provider: Optional[str] = None

        for provider in self.providers:
            last_provider = provider.name
            try:
                message_id = provider.send(record, message)
            except NotificationError as e:
                last_error = e.detail
                logger.warning(
                    f"SMS provider {provider.name} failed, trying next",
                    extra={"spin_id": record.id, "provider": provider.name, "error": e.detail},
                )
                continue
            except Exception as e:
                last_error = str(e)
                logger.exception(
                    f"SMS provider {provider.name} raised unexpectedly, trying next",
                    extra={"spin_id": record.id, "provider": provider.name},
                )
                continue

            logger.info(
                f"Coupon SMS sent via {provider.name}",
                extra={"spin_id": record.id, "provider": provider.name, "message_id": message_id},
            )
            return ChannelResult(status=ChannelStatus.SENT, provider=provider.name, detail=message_id)

        logger.error(
            "All SMS providers failed",
            extra={"spin_id": record.id, "providers": [p.name for p in self.providers]},
        )
        return ChannelResult(status=ChannelStatus.FAILED, provider=last_provider, detail=last_error)


__all__ = [
    "SmsProvider",
    "Fast2SmsProvider",
    "Msg91Provider",
    "TwilioProvider",
    "SmsService",
    "build_sms_providers",
    "coupon_sms_message",
]
