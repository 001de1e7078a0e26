"""
Authentication dependencies for API routes.

Provides:
- get_current_user: Resolve the user from the Bearer access token

Sign-in happens outside this backend; requests carry an access token
issued by TokenService.
"""

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from backend.src.config.settings import get_settings
from backend.src.db.database import get_db
from backend.src.models.user import User
from backend.src.services.token_service import TokenService


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency that requires a valid Bearer access token.

    Returns:
        The authenticated, active User

    Raises:
        HTTPException 401: If the token is missing, invalid or expired
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    service = TokenService(db, get_settings().jwt_secret_key)
    user = service.validate_token(auth_header[7:])
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


__all__ = [
    "get_current_user",
]
