"""
Pytest configuration and shared fixtures.

This file adds the project root to the Python path so that tests can import
domain, repositories, services and api modules, and provides fakes for the
notification providers so that no test reaches a real gateway.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import Settings  # noqa: E402
from domain.errors import NotificationError  # noqa: E402
from domain.spin import SpinRecord  # noqa: E402
from repositories.spin_repository import SpinRepository  # noqa: E402
from services.email_service import EmailService  # noqa: E402
from services.notification_service import NotificationDispatcher  # noqa: E402
from services.sms_service import SmsProvider, SmsService  # noqa: E402


class RecordingSmsProvider(SmsProvider):
    """SMS provider fake that records calls and optionally fails."""

    def __init__(self, name: str, fail: bool = False, error: Optional[Exception] = None):
        self.name = name
        self.fail = fail
        self.error = error
        self.calls: List[tuple] = []

    def send(self, record: SpinRecord, message: str) -> Optional[str]:
        self.calls.append((record, message))
        if self.error is not None:
            raise self.error
        if self.fail:
            raise NotificationError("sms", self.name, "gateway unreachable")
        return f"{self.name}-msg-{record.id}"


def make_record(
    id: int = 1,
    email: str = "asha@example.com",
    created_at: Optional[datetime] = None,
    **overrides,
) -> SpinRecord:
    values = dict(
        id=id,
        name="Asha",
        email=email,
        phone="+91 98765 43210",
        domain="Websites",
        discount=10,
        coupon_code="ZTX-WEB10",
        created_at=created_at or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return SpinRecord(**values)


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "spins.json"


@pytest.fixture
def repository(store_path: Path) -> SpinRepository:
    return SpinRepository(store_path)


@pytest.fixture
def sms_provider() -> RecordingSmsProvider:
    return RecordingSmsProvider("fake-sms")


@pytest.fixture
def dispatcher(sms_provider: RecordingSmsProvider) -> NotificationDispatcher:
    """Dispatcher with email unconfigured and one recording SMS provider."""
    return NotificationDispatcher(
        email_service=EmailService(Settings()),
        sms_service=SmsService([sms_provider]),
    )


@pytest.fixture
def make_sms_provider():
    return RecordingSmsProvider
