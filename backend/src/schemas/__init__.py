"""
Pydantic schemas for API request/response validation.
"""

from backend.src.schemas.report import (
    ReportMetrics,
    ReportCreate,
    ReportResponse,
    ReportListResponse,
    RemarkCreate,
    RemarkResponse,
)
from backend.src.schemas.device_token import (
    DeviceTokenCreate,
    DeviceTokenRemove,
    DeviceTokenResponse,
    DeviceTokenListResponse,
)
from backend.src.schemas.notifications import (
    NotificationResponse,
    NotificationListResponse,
    UnreadCountResponse,
    MarkAllReadResponse,
)
from backend.src.schemas.events import (
    ReportCreatedPayload,
    PipelineOutcomeResponse,
    FailedTokenResponse,
)

__all__ = [
    "ReportMetrics",
    "ReportCreate",
    "ReportResponse",
    "ReportListResponse",
    "RemarkCreate",
    "RemarkResponse",
    "DeviceTokenCreate",
    "DeviceTokenRemove",
    "DeviceTokenResponse",
    "DeviceTokenListResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "UnreadCountResponse",
    "MarkAllReadResponse",
    "ReportCreatedPayload",
    "PipelineOutcomeResponse",
    "FailedTokenResponse",
]
