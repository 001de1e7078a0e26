"""
Service layer for business logic.

This module exports the service classes used by API endpoints and by the
report notification pipeline.
"""

from backend.src.services.exceptions import (
    ServiceError,
    NotFoundError,
    ValidationError,
    PermissionDeniedError,
    DispatchError,
)
from backend.src.services.report_service import ReportService
from backend.src.services.device_token_service import DeviceTokenService
from backend.src.services.notification_service import NotificationService
from backend.src.services.token_service import TokenService
# Report notification pipeline
from backend.src.services.report_events import ReportCreatedEvent, run_report_created_pipeline
from backend.src.services.report_notification_service import (
    PipelineOutcome,
    PipelineState,
    ReportNotificationService,
)

__all__ = [
    "ServiceError",
    "NotFoundError",
    "ValidationError",
    "PermissionDeniedError",
    "DispatchError",
    "ReportService",
    "DeviceTokenService",
    "NotificationService",
    "TokenService",
    # Report notification pipeline
    "ReportCreatedEvent",
    "run_report_created_pipeline",
    "PipelineOutcome",
    "PipelineState",
    "ReportNotificationService",
]
