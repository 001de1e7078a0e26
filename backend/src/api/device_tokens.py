"""
Device token API endpoints.

The dashboard registers the FCM token it obtains after the user grants
notification permission, and removes it on sign-out.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import get_current_user
from backend.src.models.user import User
from backend.src.schemas.device_token import (
    DeviceTokenCreate,
    DeviceTokenListResponse,
    DeviceTokenRemove,
    DeviceTokenResponse,
)
from backend.src.services.device_token_service import DeviceTokenService
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.utils.rate_limiter import limiter


router = APIRouter(
    prefix="/device-tokens",
    tags=["Device Tokens"],
)


def get_device_token_service(db: Session = Depends(get_db)) -> DeviceTokenService:
    """Create DeviceTokenService instance with database session."""
    return DeviceTokenService(db=db)


@router.post(
    "",
    response_model=DeviceTokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a push token",
)
@limiter.limit("30/minute")
async def register_device_token(
    request: Request,
    body: DeviceTokenCreate,
    user: User = Depends(get_current_user),
    service: DeviceTokenService = Depends(get_device_token_service),
):
    """Register a push token for the caller's current device (idempotent)."""
    try:
        device = service.register_token(
            user_id=user.id,
            token=body.token,
            device_name=body.device_name,
        )
    except ValidationError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=err.message,
        ) from err
    return DeviceTokenResponse.model_validate(device)


@router.get(
    "",
    response_model=DeviceTokenListResponse,
    summary="List the caller's push tokens",
)
async def list_device_tokens(
    user: User = Depends(get_current_user),
    service: DeviceTokenService = Depends(get_device_token_service),
):
    devices = service.list_tokens(user_id=user.id)
    return DeviceTokenListResponse(
        items=[DeviceTokenResponse.model_validate(device) for device in devices]
    )


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a push token",
)
@limiter.limit("30/minute")
async def remove_device_token(
    request: Request,
    body: DeviceTokenRemove,
    user: User = Depends(get_current_user),
    service: DeviceTokenService = Depends(get_device_token_service),
):
    try:
        service.remove_token(user_id=user.id, token=body.token)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Device token not found",
        ) from err
