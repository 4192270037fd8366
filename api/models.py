"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Wire field names are camelCase (couponCode, createdAt) to match the wheel
client and the persisted record file.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# Spin Models
# ============================================================================

class SpinRequestBody(BaseModel):
    """
    Spin submission from the wheel client.

    Fields are optional at the schema level; missing or empty values are
    rejected by the spin service with a 400 response.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    domain: Optional[str] = None
    discount: Optional[int] = None
    coupon_code: Optional[str] = Field(None, alias="couponCode")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "name": "Asha",
                "email": "asha@example.com",
                "phone": "+91 98765 43210",
                "domain": "Websites",
                "discount": 10,
                "couponCode": "ZTX-WEB10"
            }
        }


class SpinResponse(BaseModel):
    """Outcome of a spin request. success and couponCode are omitted when unset."""
    allowed: bool
    success: Optional[bool] = None
    message: str
    coupon_code: Optional[str] = Field(None, alias="couponCode")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "allowed": True,
                "success": True,
                "message": "Coupon sent successfully!",
                "couponCode": "ZTX-WEB10"
            }
        }


# ============================================================================
# Reporting Models
# ============================================================================

class SpinRecordResponse(BaseModel):
    """A persisted spin record, as stored."""
    id: int
    name: str
    email: str
    phone: str
    domain: str
    discount: int
    coupon_code: str = Field(alias="couponCode")
    created_at: str = Field(alias="createdAt")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Asha",
                "email": "asha@example.com",
                "phone": "+91 98765 43210",
                "domain": "Websites",
                "discount": 10,
                "couponCode": "ZTX-WEB10",
                "createdAt": "2025-01-01T12:00:00+00:00"
            }
        }


# ============================================================================
# Health Models
# ============================================================================

class HealthResponse(BaseModel):
    status: str
    message: str
