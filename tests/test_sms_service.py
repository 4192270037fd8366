"""
Tests for `services/sms_service.py`.

Covers:
- Provider cascade: ordered, first success wins, failures fall through.
- Unconfigured providers are skipped.
- Gateway request formats (httpx mock transport, fake Twilio client).
"""

from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest

from config.settings import Settings
from domain.errors import NotificationError
from domain.notification import ChannelStatus
from services.sms_service import (
    Fast2SmsProvider,
    Msg91Provider,
    SmsService,
    TwilioProvider,
    build_sms_providers,
    coupon_sms_message,
)


def _mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestCascade:
    """Tests for the ordered provider fallback."""

    def test_no_providers_is_not_configured(self, record_factory) -> None:
        result = SmsService([]).send_coupon_sms(record_factory())

        assert result.status is ChannelStatus.NOT_CONFIGURED

    def test_first_success_wins(self, record_factory, make_sms_provider) -> None:
        primary = make_sms_provider("primary")
        secondary = make_sms_provider("secondary")

        result = SmsService([primary, secondary]).send_coupon_sms(record_factory())

        assert result.status is ChannelStatus.SENT
        assert result.provider == "primary"
        assert len(primary.calls) == 1
        assert secondary.calls == []

    def test_failure_falls_through_to_next_provider(self, record_factory, make_sms_provider) -> None:
        primary = make_sms_provider("primary", fail=True)
        secondary = make_sms_provider("secondary", error=RuntimeError("socket closed"))
        tertiary = make_sms_provider("tertiary")

        result = SmsService([primary, secondary, tertiary]).send_coupon_sms(record_factory())

        assert result.status is ChannelStatus.SENT
        assert result.provider == "tertiary"
        assert result.detail == "tertiary-msg-1"
        assert [len(p.calls) for p in (primary, secondary, tertiary)] == [1, 1, 1]

    def test_all_failed(self, record_factory, make_sms_provider) -> None:
        providers = [make_sms_provider("a", fail=True), make_sms_provider("b", fail=True)]

        result = SmsService(providers).send_coupon_sms(record_factory())

        assert result.status is ChannelStatus.FAILED
        assert result.provider == "b"
        assert result.detail == "gateway unreachable"

    def test_message_text(self, record_factory) -> None:
        assert coupon_sms_message(record_factory()) == (
            "Hi Asha! You just won 10% off on Websites with ZooTechX. "
            "Your coupon code is ZTX-WEB10. Show this at the ZooTechX desk to redeem."
        )


class TestBuildProviders:
    """Tests for provider selection from settings."""

    def test_unconfigured_providers_are_skipped(self) -> None:
        assert build_sms_providers(Settings()) == []

    def test_partial_credentials_do_not_configure_a_provider(self) -> None:
        settings = Settings(msg91_auth_key="key", twilio_account_sid="AC123", twilio_auth_token="token")

        assert build_sms_providers(settings) == []

    def test_cascade_order(self) -> None:
        settings = Settings(
            fast2sms_api_key="f2s",
            msg91_auth_key="m91",
            msg91_template_id="tmpl",
            twilio_account_sid="AC123",
            twilio_auth_token="token",
            twilio_phone="+15005550006",
        )

        assert [p.name for p in build_sms_providers(settings)] == ["fast2sms", "msg91", "twilio"]


class TestFast2Sms:

    def test_sends_national_number(self, record_factory) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"return": True, "request_id": "req-1", "message": ["SMS sent"]})

        provider = Fast2SmsProvider("f2s-key", timeout=5, client=_mock_client(handler))

        assert provider.send(record_factory(), "hello") == "req-1"
        assert seen["url"] == Fast2SmsProvider.URL
        assert seen["auth"] == "f2s-key"
        assert seen["body"]["numbers"] == "9876543210"
        assert seen["body"]["message"] == "hello"

    def test_rejected_response_raises(self, record_factory) -> None:
        provider = Fast2SmsProvider(
            "f2s-key",
            timeout=5,
            client=_mock_client(lambda request: httpx.Response(200, json={"return": False, "message": "Invalid key"})),
        )

        with pytest.raises(NotificationError) as excinfo:
            provider.send(record_factory(), "hello")
        assert excinfo.value.provider == "fast2sms"

    def test_http_error_raises(self, record_factory) -> None:
        provider = Fast2SmsProvider(
            "f2s-key", timeout=5, client=_mock_client(lambda request: httpx.Response(503, text="down"))
        )

        with pytest.raises(NotificationError, match="HTTP 503"):
            provider.send(record_factory(), "hello")

    def test_international_number_is_refused(self, record_factory) -> None:
        provider = Fast2SmsProvider(
            "f2s-key", timeout=5, client=_mock_client(lambda request: pytest.fail("should not be called"))
        )

        with pytest.raises(NotificationError, match="national number"):
            provider.send(record_factory(phone="+44 7700 900123"), "hello")


class TestMsg91:

    def test_sends_template_variables(self, record_factory) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["authkey"] = request.headers["authkey"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"type": "success", "message": "3763646c3058373530393138"})

        provider = Msg91Provider("m91-key", "tmpl-1", timeout=5, client=_mock_client(handler))

        assert provider.send(record_factory(), "ignored") == "3763646c3058373530393138"
        assert seen["authkey"] == "m91-key"
        assert seen["body"]["template_id"] == "tmpl-1"
        assert seen["body"]["recipients"] == [
            {
                "mobiles": "919876543210",
                "name": "Asha",
                "discount": "10",
                "domain": "Websites",
                "coupon": "ZTX-WEB10",
            }
        ]

    def test_error_type_raises(self, record_factory) -> None:
        provider = Msg91Provider(
            "m91-key",
            "tmpl-1",
            timeout=5,
            client=_mock_client(lambda request: httpx.Response(200, json={"type": "error", "message": "Invalid template"})),
        )

        with pytest.raises(NotificationError, match="Invalid template"):
            provider.send(record_factory(), "ignored")


class TestTwilio:

    def _client(self, create):
        return SimpleNamespace(messages=SimpleNamespace(create=create))

    def test_sends_dialable_number(self, record_factory) -> None:
        sent = {}

        def create(**kwargs):
            sent.update(kwargs)
            return SimpleNamespace(sid="SM123")

        provider = TwilioProvider("AC123", "token", "+15005550006", timeout=5, client=self._client(create))

        assert provider.send(record_factory(phone="0 98765-43210"), "hello") == "SM123"
        assert sent == {"body": "hello", "from_": "+15005550006", "to": "+919876543210"}

    def test_sdk_error_raises_notification_error(self, record_factory) -> None:
        def create(**kwargs):
            raise RuntimeError("Unable to create record")

        provider = TwilioProvider("AC123", "token", "+15005550006", timeout=5, client=self._client(create))

        with pytest.raises(NotificationError, match="Unable to create record"):
            provider.send(record_factory(), "hello")
