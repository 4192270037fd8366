"""
Domain: Phone number normalization for SMS dispatch.

Rules:
- Strip '+', whitespace and hyphens.
- A 12-digit number starting with the India country code '91' loses the prefix.
- A leading trunk '0' is dropped.
- A resulting 10-digit number is dialed as +91XXXXXXXXXX; anything else is
  dialed as '+' followed by the cleaned digits.
"""

from __future__ import annotations

import re

COUNTRY_CODE = "91"

_STRIP_PATTERN = re.compile(r"[+\s-]")


def normalize_phone(phone: str) -> str:
    """
    Reduce a free-text phone number to its national form.

    Example:
        normalize_phone("+91 98765 43210")  # "9876543210"
        normalize_phone("09876543210")      # "9876543210"
    """
    cleaned = _STRIP_PATTERN.sub("", phone)
    if cleaned.startswith(COUNTRY_CODE) and len(cleaned) == 12:
        cleaned = cleaned[len(COUNTRY_CODE):]
    if cleaned.startswith("0"):
        cleaned = cleaned[1:]
    return cleaned


def to_dialable(phone: str) -> str:
    """International (E.164-style) form used by gateways that need a '+' prefix."""

    national = normalize_phone(phone)
    if len(national) == 10:
        return f"+{COUNTRY_CODE}{national}"
    return f"+{national}"


def is_national_number(phone: str) -> bool:
    """True when the number is a plain 10-digit national number."""

    national = normalize_phone(phone)
    return len(national) == 10 and national.isdigit()
