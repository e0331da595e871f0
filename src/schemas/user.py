"""Admin user management schemas."""

from datetime import datetime

from pydantic import EmailStr, Field

from src.schemas.base import APIModel


class UserCreate(APIModel):
    """Create a user directly (admin only)."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    is_admin: bool = False


class UserUpdate(APIModel):
    """Update a user's email or role (admin only)."""

    email: EmailStr | None = Field(None, max_length=255)
    is_admin: bool | None = None


class UserDetail(APIModel):
    """User as seen by an admin."""

    id: int
    email: str
    is_admin: bool
    created_at: datetime
    updated_at: datetime
    task_count: int | None = None


class UserEnvelope(APIModel):
    """Single user wrapper."""

    user: UserDetail


class UserListResponse(APIModel):
    """User list wrapper."""

    users: list[UserDetail]
