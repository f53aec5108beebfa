"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from src.api.dependencies import get_auth_service
from src.errors import StorageError
from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from src.services.auth import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    try:
        user = auth.register(
            user_data.email,
            user_data.password,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
        )
    except SQLAlchemyError as e:
        logger.error(f"Registration failed: {e}", exc_info=True)
        raise StorageError("Registration failed.") from e

    return user


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    try:
        user, access_token = auth.login(credentials.email, credentials.password)
    except SQLAlchemyError as e:
        logger.error(f"Login failed: {e}", exc_info=True)
        raise StorageError("Login failed.") from e

    return AuthResponse(
        access_token=access_token,
        user=UserResponse.model_validate(user),
    )
