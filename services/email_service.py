"""
Coupon email service.

Renders the coupon email for an admitted spin and sends it through the Resend
transactional mail API.

Handles:
- Fixed HTML + plain-text template with brand header and footer
- Logo link derived from SITE_URL (falls back to the brand site logo)
- Provider errors surfaced as NotificationError for the dispatcher to record
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from html import escape
from typing import Any, Optional

import resend

from config.settings import Settings
from domain.errors import NotificationError
from domain.spin import SpinRecord

logger = logging.getLogger(__name__)

PROVIDER_NAME = "resend"

BRAND_NAME = "ZooTechX"
BRAND_SITE = "https://www.zootechx.com"
BRAND_TAGLINE = "Transforming Ideas into Digital Reality"
DEFAULT_LOGO_URL = f"{BRAND_SITE}/logo.jpg"


@dataclass(frozen=True, slots=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


def logo_url(site_url: Optional[str]) -> str:
    if site_url:
        return f"{site_url.rstrip('/')}/Logo.jpg"
    return DEFAULT_LOGO_URL


def render_coupon_email(record: SpinRecord, site_url: Optional[str] = None) -> RenderedEmail:
    """
    Render the coupon email for a spin record.

    User-supplied values are HTML-escaped in the HTML part.
    """
    name = escape(record.name)
    domain = escape(record.domain)
    coupon = escape(record.coupon_code)
    logo = escape(logo_url(site_url), quote=True)

    subject = f"Your {BRAND_NAME} Coupon Code - {record.discount}% OFF on {record.domain}"

    html = f"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><meta name="viewport" content="width=device-width, initial-scale=1.0"><title>Your {BRAND_NAME} Coupon</title></head>
<body style="margin:0;padding:0;font-family:Arial,Helvetica,sans-serif;background-color:#f4f4f4;">
<table role="presentation" width="100%" cellspacing="0" cellpadding="0" border="0" style="background-color:#f4f4f4;padding:20px 0;"><tr><td align="center">
<table role="presentation" width="600" cellspacing="0" cellpadding="0" border="0" style="background-color:#ffffff;border-radius:8px;overflow:hidden;">
  <tr><td style="background:#000000;padding:30px;text-align:center;">
    <a href="{BRAND_SITE}" target="_blank" style="text-decoration:none;"><img src="{logo}" alt="{BRAND_NAME}" style="max-width:250px;height:auto;"></a>
    <p style="color:#888;margin:10px 0 0 0;font-size:14px;">{BRAND_TAGLINE}</p>
  </td></tr>
  <tr><td style="background:linear-gradient(135deg,#00d4ff 0%,#7b2dff 100%);padding:25px;text-align:center;">
    <h2 style="color:#ffffff;margin:0;font-size:24px;">&#127881; Congratulations, {name}!</h2>
  </td></tr>
  <tr><td style="padding:40px 30px;">
    <p style="color:#333;font-size:18px;margin:0 0 20px 0;text-align:center;">You just won <strong style="color:#00d4ff;font-size:24px;">{record.discount}% OFF</strong> on <strong>{domain}</strong> services!</p>
    <table role="presentation" width="100%" cellspacing="0" cellpadding="0" border="0" style="margin:30px 0;"><tr><td align="center">
      <table role="presentation" cellspacing="0" cellpadding="0" border="0" style="background-color:#f8f9fa;border:2px dashed #00d4ff;border-radius:12px;padding:25px 40px;"><tr><td align="center">
        <p style="color:#666;font-size:12px;margin:0 0 10px 0;text-transform:uppercase;letter-spacing:2px;">Your Coupon Code</p>
        <p style="color:#1a1a2e;font-size:32px;font-weight:bold;margin:0;letter-spacing:3px;">{coupon}</p>
      </td></tr></table>
    </td></tr></table>
    <table role="presentation" width="100%" cellspacing="0" cellpadding="0" border="0" style="background-color:#f8f9fa;border-radius:8px;padding:20px;margin-top:20px;"><tr><td>
      <h3 style="color:#1a1a2e;margin:0 0 15px 0;font-size:16px;">&#128203; How to Redeem</h3>
      <p style="color:#555;margin:8px 0;font-size:14px;">1. Visit the {BRAND_NAME} booth at the event</p>
      <p style="color:#555;margin:8px 0;font-size:14px;">2. Show this email or mention your coupon code</p>
      <p style="color:#555;margin:8px 0;font-size:14px;">3. Get your exclusive discount on {domain}!</p>
    </td></tr></table>
  </td></tr>
  <tr><td style="background-color:#000000;padding:25px;text-align:center;">
    <a href="{BRAND_SITE}" target="_blank" style="text-decoration:none;"><img src="{logo}" alt="{BRAND_NAME}" style="max-width:200px;height:auto;margin:0 0 10px 0;"></a>
    <p style="color:#888;font-size:12px;margin:0 0 10px 0;">{BRAND_TAGLINE}</p>
    <p style="color:#00d4ff;font-size:12px;margin:0 0 10px 0;"><a href="{BRAND_SITE}" target="_blank" style="color:#00d4ff;text-decoration:none;">www.zootechx.com</a></p>
    <p style="color:#666;font-size:11px;margin:0;">&copy; 2025 {BRAND_NAME}. All rights reserved.</p>
  </td></tr>
</table>
</td></tr></table>
</body>
</html>"""

    text = (
        f"Congratulations, {record.name}!\n\n"
        f"You just won {record.discount}% OFF on {record.domain} services!\n\n"
        f"Your coupon code: {record.coupon_code}\n\n"
        "How to redeem:\n"
        f"1. Visit the {BRAND_NAME} booth at the event\n"
        "2. Show this email or mention your coupon code\n"
        f"3. Get your exclusive discount on {record.domain}!\n\n"
        f"{BRAND_NAME} - {BRAND_TAGLINE}\n"
        f"{BRAND_SITE}\n"
    )

    return RenderedEmail(subject=subject, html=html, text=text)


class EmailService:
    """Sends coupon emails via Resend using the configured credentials."""

    def __init__(self, settings: Settings):
        self._settings = settings

    @property
    def configured(self) -> bool:
        return self._settings.email_configured

    def send_coupon_email(self, record: SpinRecord) -> Optional[str]:
        """
        Send the coupon email to the participant.

        Returns:
            Provider message id (may be None if the provider omits it)

        Raises:
            NotificationError: If the provider rejects the message or the call fails
        """
        rendered = render_coupon_email(record, self._settings.site_url)

        params: dict[str, Any] = {
            "from": f"{BRAND_NAME} <{self._settings.from_email}>",
            "to": [record.email],
            "subject": rendered.subject,
            "html": rendered.html,
            "text": rendered.text,
        }

        resend.api_key = self._settings.resend_api_key
        try:
            response = resend.Emails.send(params)
        except Exception as e:
            raise NotificationError("email", PROVIDER_NAME, str(e)) from e

        email_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
        logger.info(f"Coupon email sent to spin {record.id}", extra={"email_id": email_id})
        return email_id


__all__ = ["EmailService", "RenderedEmail", "render_coupon_email", "logo_url"]
