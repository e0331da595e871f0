"""Authentication schemas."""

from datetime import datetime

from pydantic import EmailStr, Field

from src.schemas.base import APIModel


class UserRegister(APIModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)


class UserLogin(APIModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(APIModel):
    """User information response."""

    id: int
    email: str
    is_admin: bool
    created_at: datetime


class AuthResponse(APIModel):
    """Authentication response with user info; the token travels in the session cookie."""

    user: UserResponse
    message: str


class MeResponse(APIModel):
    """Current user response."""

    user: UserResponse


class MessageResponse(APIModel):
    """Plain confirmation message."""

    message: str
