"""
Domain: Spin records.

Contract excerpts implemented here:
- A SpinRecord represents one participation event and is created exactly once,
  at the moment a spin request is admitted.
- email is the natural key: at most one SpinRecord may exist per email.
- Records are append-only; they are never mutated or deleted after creation.
- phone is stored exactly as submitted. Normalization happens only when an
  SMS is dispatched (see domain/phone.py).

This module contains only pure domain entities: no I/O, no frameworks.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from .time import parse_utc_timestamp, require_utc_timestamp, to_iso_utc


@dataclass(frozen=True, slots=True)
class SpinRecord:
    """
    Immutable record of an admitted spin.

    discount and coupon_code are supplied by the caller (the winning wheel
    segment) and are stored verbatim.
    """

    id: int
    name: str
    email: str
    phone: str
    domain: str
    discount: int
    coupon_code: str
    created_at: datetime

    def __post_init__(self) -> None:
        if self.id < 1:
            raise ValueError("id must be a positive integer")
        for field_name in ("name", "email", "phone", "domain", "coupon_code"):
            if not getattr(self, field_name):
                raise ValueError(f"{field_name} must be non-empty")
        require_utc_timestamp("created_at", self.created_at)

    def to_dict(self) -> dict[str, Any]:
        """Wire/storage representation (camelCase keys, ISO-8601 createdAt)."""

        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "domain": self.domain,
            "discount": self.discount,
            "couponCode": self.coupon_code,
            "createdAt": to_iso_utc(self.created_at, name="created_at"),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SpinRecord":
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            email=str(data["email"]),
            phone=str(data["phone"]),
            domain=str(data["domain"]),
            discount=int(data["discount"]),
            coupon_code=str(data["couponCode"]),
            created_at=parse_utc_timestamp(data["createdAt"]),
        )
