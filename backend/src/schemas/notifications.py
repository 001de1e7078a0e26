"""
Pydantic schemas for in-app notification responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from backend.src.models.notification import Notification


class NotificationResponse(BaseModel):
    """Response schema for one bell notification."""

    guid: str = Field(..., description="Notification GUID (ntf_xxx)")
    type: str
    message: str
    report_guid: Optional[str] = None
    is_read: bool
    created_at: datetime

    @field_serializer("created_at")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone."""
        return v.isoformat() + "Z"

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            guid=notification.guid,
            type=notification.type.value,
            message=notification.message,
            report_guid=notification.report.guid if notification.report else None,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


class NotificationListResponse(BaseModel):
    items: List[NotificationResponse]
    total: int
    limit: int
    offset: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated_count: int
