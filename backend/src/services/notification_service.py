"""
Notification service for the in-app notification bell.

Provides business logic for:
- Creating notification records
- Listing notifications with pagination
- Unread counts
- Marking notifications as read
"""

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.src.models.notification import Notification, NotificationType
from backend.src.services.exceptions import NotFoundError
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")

MAX_MESSAGE_LENGTH = 500


class NotificationService:
    """Service for in-app notification records."""

    def __init__(self, db: Session):
        self.db = db

    def create_notification(
        self,
        user_id: int,
        message: str,
        notification_type: NotificationType = NotificationType.COMMENT,
        report_id: Optional[int] = None,
        commit: bool = True,
    ) -> Notification:
        """
        Create a notification record.

        Args:
            user_id: Recipient user's internal ID
            message: Text shown in the bell panel (truncated to 500 chars)
            notification_type: NotificationType
            report_id: Related report's internal ID
            commit: Commit immediately; pass False to batch with the caller's
                transaction

        Returns:
            Created Notification instance
        """
        notification = Notification(
            user_id=user_id,
            report_id=report_id,
            type=notification_type,
            message=message[:MAX_MESSAGE_LENGTH],
            is_read=False,
        )
        self.db.add(notification)
        if commit:
            self.db.commit()
            self.db.refresh(notification)
        return notification

    def get_notification(self, guid: str, user_id: int) -> Notification:
        """
        Get one of a user's notifications by GUID.

        Raises:
            NotFoundError: If not found or owned by another user
        """
        try:
            uuid_value = Notification.parse_guid(guid)
        except ValueError:
            raise NotFoundError("Notification", guid)

        notification = (
            self.db.query(Notification)
            .filter(Notification.uuid == uuid_value, Notification.user_id == user_id)
            .first()
        )
        if not notification:
            raise NotFoundError("Notification", guid)
        return notification

    def list_notifications(
        self,
        user_id: int,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> Tuple[List[Notification], int]:
        """
        List a user's notifications, newest first.

        Returns:
            Tuple of (notifications, total count)
        """
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))

        total = query.count()
        notifications = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return notifications, total

    def get_unread_count(self, user_id: int) -> int:
        return (
            self.db.query(func.count(Notification.id))
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .scalar()
        )

    def mark_as_read(self, guid: str, user_id: int) -> Notification:
        """Mark a notification as read (idempotent)."""
        notification = self.get_notification(guid, user_id)
        if not notification.is_read:
            notification.is_read = True
            self.db.commit()
            self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user_id: int) -> int:
        """
        Mark all of a user's unread notifications as read.

        Returns:
            Number of notifications updated
        """
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({"is_read": True}, synchronize_session="fetch")
        )
        self.db.commit()
        return updated
