"""
Device token service for managing push delivery registrations.

Provides business logic for registering, removing, listing and cleaning
up FCM registration tokens.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from backend.src.models.device_token import DeviceToken
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class DeviceTokenService:
    """
    Service for managing device push tokens.

    Handles token lifecycle:
    - Register (idempotent per user)
    - Remove (by token + user)
    - List (by user)
    - Remove invalid (tokens the push service reports as unregistered)
    - Mark used (after successful delivery)
    """

    def __init__(self, db: Session):
        self.db = db

    def register_token(
        self,
        user_id: int,
        token: str,
        device_name: Optional[str] = None,
    ) -> DeviceToken:
        """
        Register a push token for a user.

        If the user already registered this token, the existing row is
        returned with its device name refreshed.

        Args:
            user_id: Owning user's internal ID
            token: FCM registration token
            device_name: Optional user-friendly device label

        Returns:
            Created or existing DeviceToken

        Raises:
            ValidationError: If the token is blank
        """
        token = (token or "").strip()
        if not token:
            raise ValidationError("Push token cannot be empty", field="token")

        existing = (
            self.db.query(DeviceToken)
            .filter(DeviceToken.user_id == user_id, DeviceToken.token == token)
            .first()
        )
        if existing:
            if device_name and existing.device_name != device_name:
                existing.device_name = device_name
                self.db.commit()
                self.db.refresh(existing)
            return existing

        device = DeviceToken(user_id=user_id, token=token, device_name=device_name)
        self.db.add(device)
        self.db.commit()
        self.db.refresh(device)
        logger.info(
            "Registered push token",
            extra={"guid": device.guid, "user_id": user_id},
        )
        return device

    def remove_token(self, user_id: int, token: str) -> None:
        """
        Remove one of a user's push tokens.

        Raises:
            NotFoundError: If the user has no such token
        """
        device = (
            self.db.query(DeviceToken)
            .filter(DeviceToken.user_id == user_id, DeviceToken.token == token)
            .first()
        )
        if not device:
            raise NotFoundError("DeviceToken", token[:16])

        self.db.delete(device)
        self.db.commit()
        logger.info("Removed push token", extra={"user_id": user_id})

    def list_tokens(self, user_id: int) -> List[DeviceToken]:
        """List a user's registered tokens, newest first."""
        return (
            self.db.query(DeviceToken)
            .filter(DeviceToken.user_id == user_id)
            .order_by(DeviceToken.created_at.desc(), DeviceToken.id.desc())
            .all()
        )

    def remove_invalid(self, tokens: Iterable[str]) -> int:
        """
        Delete tokens the push service reported as unregistered.

        Removes the token from every account it is registered under.

        Returns:
            Number of rows deleted
        """
        tokens = list(set(tokens))
        if not tokens:
            return 0

        count = (
            self.db.query(DeviceToken)
            .filter(DeviceToken.token.in_(tokens))
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if count:
            logger.info(
                f"Removed {count} unregistered push token(s)",
                extra={"token_count": len(tokens)},
            )
        return count

    def mark_used(self, tokens: Iterable[str]) -> None:
        """Stamp last_used_at on every row holding one of the tokens."""
        tokens = list(set(tokens))
        if not tokens:
            return
        (
            self.db.query(DeviceToken)
            .filter(DeviceToken.token.in_(tokens))
            .update({"last_used_at": datetime.utcnow()}, synchronize_session=False)
        )
        self.db.commit()
