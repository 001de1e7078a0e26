"""
Pydantic schemas for device token registration.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer


class DeviceTokenCreate(BaseModel):
    """
    Schema for registering a push token.

    Required:
        token: FCM registration token obtained by the dashboard

    Optional:
        device_name: User-friendly device label
    """

    token: str = Field(..., min_length=1, max_length=512)
    device_name: Optional[str] = Field(default=None, max_length=100)

    model_config = {
        "json_schema_extra": {
            "example": {
                "token": "fGx1c2VyLXRva2VuOkFQQTkxYkg...",
                "device_name": "Pixel 8",
            }
        }
    }


class DeviceTokenRemove(BaseModel):
    token: str = Field(..., min_length=1, max_length=512)


class DeviceTokenResponse(BaseModel):
    """Response schema for a registered token. The token itself is not echoed back."""

    guid: str = Field(..., description="Device token GUID (dvt_xxx)")
    device_name: Optional[str] = None
    created_at: datetime
    last_used_at: Optional[datetime] = None

    @field_serializer("created_at", "last_used_at")
    @classmethod
    def serialize_datetime_utc(cls, v: Optional[datetime]) -> Optional[str]:
        """Serialize datetime as ISO 8601 with explicit UTC timezone."""
        return v.isoformat() + "Z" if v else None

    model_config = {"from_attributes": True}


class DeviceTokenListResponse(BaseModel):
    items: List[DeviceTokenResponse]
