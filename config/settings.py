"""
Application settings.

Settings are read once from the environment (optionally seeded from a .env
file in the project root) and passed explicitly to the store, the
notification dispatcher and the SMS providers.

Recognized environment variables:
- SPINS_FILE: JSON file holding spin records (default: data/spins.json)
- RESEND_API_KEY, FROM_EMAIL: transactional email provider
- SITE_URL: base URL used for the logo link in emails
- FAST2SMS_API_KEY: primary SMS gateway
- MSG91_AUTH_KEY, MSG91_TEMPLATE_ID: secondary SMS gateway
- TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE: international SMS gateway
- NOTIFY_TIMEOUT_SECONDS: timeout for outbound provider calls (default: 15)
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_SPINS_FILE = PROJECT_ROOT / "data" / "spins.json"
DEFAULT_NOTIFY_TIMEOUT_SECONDS = 15.0
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable process configuration. Missing credentials disable a provider."""

    spins_file: Path = DEFAULT_SPINS_FILE

    # Email (Resend)
    resend_api_key: Optional[str] = None
    from_email: Optional[str] = None
    site_url: Optional[str] = None

    # SMS providers, in cascade order
    fast2sms_api_key: Optional[str] = None
    msg91_auth_key: Optional[str] = None
    msg91_template_id: Optional[str] = None
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_phone: Optional[str] = None

    notify_timeout_seconds: float = DEFAULT_NOTIFY_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def email_configured(self) -> bool:
        return bool(self.resend_api_key and self.from_email)

    @property
    def fast2sms_configured(self) -> bool:
        return bool(self.fast2sms_api_key)

    @property
    def msg91_configured(self) -> bool:
        return bool(self.msg91_auth_key and self.msg91_template_id)

    @property
    def twilio_configured(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone)

    @property
    def sms_configured(self) -> bool:
        return self.fast2sms_configured or self.msg91_configured or self.twilio_configured


def _optional(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key, "").strip()
    return value or None


def settings_from_env(env: Mapping[str, str]) -> Settings:
    """Build Settings from a mapping of environment variables."""

    timeout_raw = _optional(env, "NOTIFY_TIMEOUT_SECONDS")
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_NOTIFY_TIMEOUT_SECONDS
    except ValueError:
        raise RuntimeError(
            f"Invalid NOTIFY_TIMEOUT_SECONDS: {timeout_raw!r}. Set it to a number of seconds."
        )

    spins_file = _optional(env, "SPINS_FILE")

    return Settings(
        spins_file=Path(spins_file) if spins_file else DEFAULT_SPINS_FILE,
        resend_api_key=_optional(env, "RESEND_API_KEY"),
        from_email=_optional(env, "FROM_EMAIL"),
        site_url=_optional(env, "SITE_URL"),
        fast2sms_api_key=_optional(env, "FAST2SMS_API_KEY"),
        msg91_auth_key=_optional(env, "MSG91_AUTH_KEY"),
        msg91_template_id=_optional(env, "MSG91_TEMPLATE_ID"),
        twilio_account_sid=_optional(env, "TWILIO_ACCOUNT_SID"),
        twilio_auth_token=_optional(env, "TWILIO_AUTH_TOKEN"),
        twilio_phone=_optional(env, "TWILIO_PHONE"),
        notify_timeout_seconds=timeout,
        log_level=(_optional(env, "LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from the process environment.

    Variables already set in the environment win over values in the .env file.
    """

    load_dotenv(dotenv_path=env_file or PROJECT_ROOT / ".env")
    return settings_from_env(os.environ)


__all__ = ["Settings", "load_settings", "settings_from_env", "LOG_FORMAT"]
