"""Pydantic schemas for API requests and responses."""

from src.schemas.ai import AssignUserRequest, AssignUserResponse, SuggestRequest, SuggestResponse
from src.schemas.auth import AuthResponse, MeResponse, MessageResponse, UserLogin, UserRegister, UserResponse
from src.schemas.task import (
    TaskCreate,
    TaskEnvelope,
    TaskListResponse,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from src.schemas.user import UserCreate, UserDetail, UserEnvelope, UserListResponse, UserUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "MeResponse",
    "MessageResponse",
    "TaskCreate",
    "TaskUpdate",
    "TaskStatusUpdate",
    "TaskResponse",
    "TaskEnvelope",
    "TaskListResponse",
    "UserCreate",
    "UserUpdate",
    "UserDetail",
    "UserEnvelope",
    "UserListResponse",
    "SuggestRequest",
    "SuggestResponse",
    "AssignUserRequest",
    "AssignUserResponse",
]
