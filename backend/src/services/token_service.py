"""
Token service for access token handling.

Login flows live outside this backend; whatever signs the user in mints
an access token here, and API requests present it as a Bearer token.

Design:
- Tokens are JWTs signed with JWT_SECRET_KEY (HS256)
- The subject is the user GUID (usr_xxx)
- Validation re-reads the user so deactivation takes effect immediately
"""

from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
from sqlalchemy.orm import Session

from backend.src.models.user import User
from backend.src.services.exceptions import ValidationError
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


TOKEN_ALGORITHM = "HS256"
TOKEN_TYPE = "access"
DEFAULT_TOKEN_EXPIRY_HOURS = 12


class TokenService:
    """
    Service for issuing and validating access tokens.

    Usage:
        >>> service = TokenService(db_session, jwt_secret)
        >>> token = service.create_access_token(user)
        >>> service.validate_token(token)
        <User(id=1, ...)>
    """

    def __init__(self, db: Session, jwt_secret: str):
        """
        Args:
            db: SQLAlchemy database session
            jwt_secret: Secret key for JWT signing
        """
        self.db = db
        self.jwt_secret = jwt_secret

    def create_access_token(
        self,
        user: User,
        expires_in_hours: int = DEFAULT_TOKEN_EXPIRY_HOURS,
    ) -> str:
        """
        Issue a signed access token for a user.

        Raises:
            ValidationError: If no signing secret is configured
        """
        if not self.jwt_secret:
            raise ValidationError("JWT_SECRET_KEY is not configured")

        now = datetime.utcnow()
        payload = {
            "sub": user.guid,
            "role": user.role.value,
            "iat": now,
            "exp": now + timedelta(hours=expires_in_hours),
            "type": TOKEN_TYPE,
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=TOKEN_ALGORITHM)

    def validate_token(self, token: str) -> Optional[User]:
        """
        Validate an access token.

        Returns:
            The active User the token belongs to, or None if the token is
            invalid, expired, or the user is unknown/inactive
        """
        if not self.jwt_secret:
            return None

        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=[TOKEN_ALGORITHM])
        except JWTError as e:
            logger.warning(f"Token validation failed: JWT error - {e}")
            return None

        if payload.get("type") != TOKEN_TYPE:
            logger.warning("Token validation failed: not an access token")
            return None

        try:
            user_uuid = User.parse_guid(payload.get("sub", ""))
        except ValueError:
            logger.warning("Token validation failed: malformed subject")
            return None

        user = self.db.query(User).filter(User.uuid == user_uuid).first()
        if not user or not user.is_active:
            logger.warning("Token validation failed: user unknown or inactive")
            return None

        return user
