"""
Domain: Canonical wheel configuration.

The wheel is rendered and spun client side; the server receives the winning
segment verbatim. These segments mirror the client configuration so that
off-wheel submissions can be detected and logged. They are not used to reject
spins.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ServiceDomain(str, Enum):
    CHATBOTS = "Chatbots"
    WEBSITES = "Websites"
    MOBILE_APPS = "Mobile Apps"
    CUSTOM_SOFTWARE = "Custom Software"


@dataclass(frozen=True, slots=True)
class WheelSegment:
    domain: ServiceDomain
    discount: int
    coupon_code: str


WHEEL_SEGMENTS: tuple[WheelSegment, ...] = (
    WheelSegment(ServiceDomain.CHATBOTS, 10, "ZTX-CBOT10"),
    WheelSegment(ServiceDomain.CHATBOTS, 15, "ZTX-CBOT15"),
    WheelSegment(ServiceDomain.WEBSITES, 10, "ZTX-WEB10"),
    WheelSegment(ServiceDomain.WEBSITES, 15, "ZTX-WEB15"),
    WheelSegment(ServiceDomain.MOBILE_APPS, 10, "ZTX-MAPP10"),
    WheelSegment(ServiceDomain.MOBILE_APPS, 15, "ZTX-MAPP15"),
    WheelSegment(ServiceDomain.CUSTOM_SOFTWARE, 10, "ZTX-CUST10"),
    WheelSegment(ServiceDomain.CUSTOM_SOFTWARE, 15, "ZTX-CUST15"),
)


def find_segment(domain: str, discount: int, coupon_code: str) -> WheelSegment | None:
    """Return the wheel segment matching all three values, if any."""

    for segment in WHEEL_SEGMENTS:
        if (
            segment.domain.value == domain
            and segment.discount == discount
            and segment.coupon_code == coupon_code
        ):
            return segment
    return None
