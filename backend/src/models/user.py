"""
User model for staff accounts.

Users are the account directory consulted when a report is submitted:
administrators hear about every report, regional managers hear about
reports from the regions they are assigned to.

Design Rationale:
- Role is a small closed set stored as an enum
- Region assignments live in user_regions so "role = RSM AND region = X"
  is a plain indexed join on every supported database
- Push tokens live in device_tokens; one account may register many devices
"""

import enum
from datetime import datetime
from typing import List

from sqlalchemy import (
    Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class UserRole(enum.Enum):
    """
    Staff role.

    - ADMIN: Top-level administrator, notified of every report
    - RSM: Regional sales manager, notified of reports from assigned regions
    - ASM: Area sales manager
    - USER: Field staff submitting reports
    """
    ADMIN = "Admin"
    RSM = "RSM"
    ASM = "ASM"
    USER = "User"


class Region(enum.Enum):
    """Sales regions a report or manager can belong to."""
    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"
    HQ = "HQ"


class User(Base, GuidMixin):
    """
    Staff account.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (usr_xxx, inherited from GuidMixin)
        email: Login email (unique)
        display_name: Name shown on reports and notifications
        role: UserRole
        is_active: Deactivated accounts are never notified
        created_at: Creation timestamp
        updated_at: Last update timestamp

    Relationships:
        region_assignments: UserRegion rows (one-to-many)
        device_tokens: Registered push tokens (one-to-many)
    """

    __tablename__ = "users"
    GUID_PREFIX = "usr"

    id = Column(Integer, primary_key=True, autoincrement=True)

    email = Column(String(255), unique=True, nullable=False, index=True)
    display_name = Column(String(255), nullable=True)
    role = Column(
        Enum(UserRole, name="user_role", create_constraint=True,
             values_callable=lambda roles: [r.value for r in roles]),
        default=UserRole.USER,
        nullable=False,
        index=True
    )
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    region_assignments = relationship(
        "UserRegion",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserRegion.id",
        lazy="selectin",
    )
    device_tokens = relationship(
        "DeviceToken",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def regions(self) -> List[str]:
        """Assigned region labels, in assignment order."""
        return [assignment.region for assignment in self.region_assignments]

    @property
    def push_tokens(self) -> List[str]:
        """Registered push tokens for this account."""
        return [device.token for device in self.device_tokens]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"


class UserRegion(Base):
    """
    Region assignment for a user.

    A regional manager may cover several regions; field staff usually
    have one, which is copied onto the reports they submit.
    """

    __tablename__ = "user_regions"
    __table_args__ = (
        UniqueConstraint("user_id", "region", name="uq_user_regions_user_region"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    region = Column(String(50), nullable=False, index=True)

    user = relationship("User", back_populates="region_assignments")
