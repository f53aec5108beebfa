"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from src.schemas.task import TaskCreate, TaskResponse, TaskSummaryResponse, TaskUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskSummaryResponse",
]
