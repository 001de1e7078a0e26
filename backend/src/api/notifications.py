"""
Notifications API endpoints for the in-app notification bell.

Provides endpoints for:
- Notification history (list, unread count)
- Marking notifications as read
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import get_current_user
from backend.src.models.user import User
from backend.src.schemas.notifications import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from backend.src.services.exceptions import NotFoundError
from backend.src.services.notification_service import NotificationService


router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Create NotificationService instance with database session."""
    return NotificationService(db=db)


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List notifications",
)
async def list_notifications(
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False),
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """List the caller's notifications, newest first."""
    notifications, total = service.list_notifications(
        user_id=user.id,
        limit=limit,
        offset=offset,
        unread_only=unread_only,
    )
    return NotificationListResponse(
        items=[NotificationResponse.from_notification(n) for n in notifications],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="Count unread notifications",
)
async def get_unread_count(
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return UnreadCountResponse(unread_count=service.get_unread_count(user.id))


@router.post(
    "/read-all",
    response_model=MarkAllReadResponse,
    summary="Mark all notifications as read",
)
async def mark_all_as_read(
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return MarkAllReadResponse(updated_count=service.mark_all_as_read(user.id))


@router.post(
    "/{guid}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read",
)
async def mark_as_read(
    guid: str,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    try:
        notification = service.mark_as_read(guid, user_id=user.id)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        ) from err
    return NotificationResponse.from_notification(notification)
