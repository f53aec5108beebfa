"""FastAPI dependencies for authentication, configuration and services."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.config import Settings
from src.database import get_db
from src.errors import AuthenticationError
from src.services.auth import AuthService, PasswordHasher, TokenService
from src.services.tasks import TaskStore

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Get the settings the running application was built with."""
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> int:
    """Get the authenticated user's id from the bearer token."""
    if credentials is None:
        raise AuthenticationError("No token provided")
    return tokens.verify(credentials.credentials)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, hasher, tokens)


def get_task_store(
    db: Annotated[Session, Depends(get_db)],
) -> TaskStore:
    """Get task store with dependencies."""
    return TaskStore(db)
