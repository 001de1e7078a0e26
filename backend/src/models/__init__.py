"""
SQLAlchemy models for the DailyPulse application.

This module provides the declarative base class and imports all models
to ensure they are registered with SQLAlchemy's metadata.
"""

from sqlalchemy.orm import declarative_base

# All models inherit from this Base class
Base = declarative_base()


# Import all models here so they are registered with Base.metadata
# This is required for Alembic autogenerate to detect models
from backend.src.models.user import User, UserRegion, UserRole, Region
from backend.src.models.device_token import DeviceToken
from backend.src.models.report import Report, ReportRemark
from backend.src.models.notification import Notification, NotificationType

__all__ = [
    "Base",
    "User",
    "UserRegion",
    "UserRole",
    "Region",
    "DeviceToken",
    "Report",
    "ReportRemark",
    "Notification",
    "NotificationType",
]
