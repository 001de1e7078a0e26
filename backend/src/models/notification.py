"""
Notification model for the in-app notification bell.

Stores messages shown in the dashboard's bell panel, independent of push
delivery. Remark activity on a report creates "comment" notifications for
everyone taking part in the discussion.
"""

import enum
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class NotificationType(enum.Enum):
    """Kind of in-app notification; the dashboard routes clicks by type."""
    COMMENT = "comment"
    REMINDER = "reminder"


class Notification(Base, GuidMixin):
    """
    In-app notification for one user.

    Attributes:
        type: NotificationType
        message: Text shown in the bell panel (max 500 chars)
        report_id: Related report, if any
        is_read: Whether the user has opened the notification

    Relationships:
        user: Recipient User (many-to-one)
        report: Related Report (many-to-one, optional)
    """

    __tablename__ = "notifications"
    GUID_PREFIX = "ntf"

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    report_id = Column(
        Integer,
        ForeignKey("reports.id", ondelete="CASCADE"),
        nullable=True,
    )

    type = Column(
        Enum(NotificationType, name="notification_type", create_constraint=True,
             values_callable=lambda types: [t.value for t in types]),
        nullable=False,
    )
    message = Column(String(500), nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = relationship("User")
    report = relationship("Report")

    # Partial index for unread count queries
    __table_args__ = (
        Index(
            "ix_notifications_user_unread",
            "user_id",
            postgresql_where=(is_read.is_(False)),
        ),
    )
