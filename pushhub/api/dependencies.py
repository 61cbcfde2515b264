"""FastAPI dependencies for authentication, tenancy and push delivery."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pushhub.database import get_db
from pushhub.exceptions import PushNotConfiguredError
from pushhub.models.client import Client
from pushhub.models.enums import UserRole
from pushhub.models.user import User
from pushhub.services.auth import decode_access_token
from pushhub.services.push_delivery import PushDeliveryClient, get_push_delivery_client

logger = logging.getLogger(__name__)

security = HTTPBearer()

INACTIVE_ACCOUNT_DETAIL = "Your account is currently inactive. Please contact support."


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    token = credentials.credentials
    payload = decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def require_master(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Allow only master administrators."""
    if current_user.role != UserRole.MASTER.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Required role: master",
        )
    return current_user


def get_current_client(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Client:
    """Get the active tenant of a client-role user."""
    if current_user.role != UserRole.CLIENT.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Required role: client",
        )
    if current_user.client_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User not associated with any client.",
        )

    client = db.get(Client, current_user.client_id)
    if client is None or not client.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=INACTIVE_ACCOUNT_DETAIL)
    return client


def get_push_client() -> PushDeliveryClient:
    """Get the push delivery client, or disable the endpoint if VAPID is unset."""
    try:
        return get_push_delivery_client()
    except PushNotConfiguredError as e:
        logger.warning(f"Push notifications disabled: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Push notifications are not configured",
        ) from e
