"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pushhub.api.dependencies import INACTIVE_ACCOUNT_DETAIL, get_current_user
from pushhub.database import get_db
from pushhub.models.enums import UserRole
from pushhub.models.user import User
from pushhub.schemas.auth import AuthResponse, UserLogin, UserResponse
from pushhub.services.auth import authenticate_user, create_access_token

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Client users of a deactivated tenant cannot sign in
    if user.role == UserRole.CLIENT.value and (user.client is None or not user.client.is_active):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=INACTIVE_ACCOUNT_DETAIL)

    access_token = create_access_token(user.id, user.email, user.role)

    return AuthResponse(
        access_token=access_token,
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.post("/verify", response_model=UserResponse)
async def verify_token(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Confirm the bearer token is valid."""
    return current_user


@router.post("/logout")
async def logout(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout (client should discard token)."""
    return {"message": "Logged out successfully"}
