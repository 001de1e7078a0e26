"""
DeviceToken model for push delivery registrations.

Stores a Firebase Cloud Messaging registration token for one user's
device or browser.

A token is unique per user, but the same token may be registered by
several users when a shared device is signed into by different staff.
Consumers that fan out to many users must deduplicate tokens globally.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class DeviceToken(Base, GuidMixin):
    """
    Push registration token for a user's device.

    Attributes:
        token: FCM registration token
        device_name: Optional user-friendly label (e.g., "Pixel 8")
        last_used_at: Timestamp of last successful delivery

    Lifecycle:
        Created when the dashboard obtains a token after permission grant.
        Removed when the user signs out of a device, or when the push
        service reports the token as unregistered.
    """

    __tablename__ = "device_tokens"
    __table_args__ = (
        UniqueConstraint("user_id", "token", name="uq_device_tokens_user_token"),
    )
    GUID_PREFIX = "dvt"

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    token = Column(String(512), nullable=False, index=True)
    device_name = Column(String(100), nullable=True)

    last_used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="device_tokens")
