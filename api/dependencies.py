"""
Dependency wiring for the API.

Settings are loaded once per process; the repository, notification
dispatcher and spin service are built from them once and shared. Tests swap
these out through `app.dependency_overrides`.
"""

from functools import lru_cache

from config.settings import Settings, load_settings
from repositories.spin_repository import SpinRepository
from services.email_service import EmailService
from services.notification_service import NotificationDispatcher
from services.sms_service import SmsService, build_sms_providers
from services.spin_service import SpinService


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def get_spin_repository() -> SpinRepository:
    return SpinRepository(get_settings().spins_file)


@lru_cache(maxsize=1)
def get_notification_dispatcher() -> NotificationDispatcher:
    settings = get_settings()
    return NotificationDispatcher(
        email_service=EmailService(settings),
        sms_service=SmsService(build_sms_providers(settings)),
    )


@lru_cache(maxsize=1)
def get_spin_service() -> SpinService:
    return SpinService(get_spin_repository(), get_notification_dispatcher())
