"""
Account directory lookups used to resolve notification recipients.

The pipeline depends on two query shapes only:
- all accounts with the administrator role
- all regional-manager accounts whose region list contains a region

AccountDirectory is the async seam for those queries; SqlAccountDirectory
answers them from the users/user_regions tables.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.src.models.user import User, UserRegion, UserRole


@dataclass(frozen=True)
class DirectoryAccount:
    """
    Directory view of one account.

    push_tokens is whatever the directory holds for the account. Callers
    must tolerate a missing or malformed value.
    """

    account_id: str
    role: str
    regions: Tuple[str, ...] = ()
    push_tokens: Any = field(default_factory=tuple)

    @classmethod
    def from_user(cls, user: User) -> "DirectoryAccount":
        return cls(
            account_id=user.guid,
            role=user.role.value,
            regions=tuple(user.regions),
            push_tokens=list(user.push_tokens),
        )


class AccountDirectory(ABC):
    """Read-only account roster queried once per report."""

    @abstractmethod
    async def list_admins(self) -> List[DirectoryAccount]:
        """Return every top-level administrator account."""

    @abstractmethod
    async def list_regional_managers(self, region: str) -> List[DirectoryAccount]:
        """Return every regional manager assigned to the given region."""


class SqlAccountDirectory(AccountDirectory):
    """
    AccountDirectory backed by the users table. Inactive accounts are skipped.

    Queries run in a worker thread so the event loop stays free. A failed
    query rolls the session back before re-raising, so the next lookup on
    the same session starts from a clean transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    async def _fetch(self, load_users: Callable[[], List[User]]) -> List[DirectoryAccount]:
        def run() -> List[DirectoryAccount]:
            try:
                return [DirectoryAccount.from_user(user) for user in load_users()]
            except SQLAlchemyError:
                self.db.rollback()
                raise

        return await asyncio.to_thread(run)

    async def list_admins(self) -> List[DirectoryAccount]:
        return await self._fetch(
            lambda: self.db.query(User)
            .filter(
                User.role == UserRole.ADMIN,
                User.is_active.is_(True),
            )
            .all()
        )

    async def list_regional_managers(self, region: str) -> List[DirectoryAccount]:
        return await self._fetch(
            lambda: self.db.query(User)
            .join(UserRegion, UserRegion.user_id == User.id)
            .filter(
                User.role == UserRole.RSM,
                User.is_active.is_(True),
                UserRegion.region == region,
            )
            .all()
        )
