"""User management API endpoints (admin only)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_admin, get_user_service
from src.models.user import User
from src.schemas.auth import MessageResponse
from src.schemas.user import UserCreate, UserDetail, UserEnvelope, UserListResponse, UserUpdate
from src.services.authorization import Action, authorize, enforce
from src.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def _detail(user: User, task_count: int | None = None) -> UserDetail:
    detail = UserDetail.model_validate(user)
    detail.task_count = task_count
    return detail


@router.get("", response_model=UserListResponse)
def list_users(
    admin: Annotated[User, Depends(get_current_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get all other users with their task counts."""
    users = service.list_users(exclude_id=admin.id)
    return UserListResponse(users=[_detail(user, count) for user, count in users])


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    admin: Annotated[User, Depends(get_current_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Create a user directly."""
    user = service.create(user_data.email, user_data.password, is_admin=user_data.is_admin)
    logger.info(f"Admin {admin.id} created user {user.id}")
    return UserEnvelope(user=_detail(user))


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user(
    user_id: int,
    admin: Annotated[User, Depends(get_current_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get a specific user."""
    user = service.get(user_id)
    return UserEnvelope(user=_detail(user, service.task_count(user)))


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    admin: Annotated[User, Depends(get_current_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Update a user's email or admin flag."""
    user = service.update(user_id, email=user_data.email, is_admin=user_data.is_admin)
    logger.info(f"Admin {admin.id} updated user {user.id}")
    return UserEnvelope(user=_detail(user))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: Annotated[User, Depends(get_current_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Delete a user and, with them, all their tasks."""
    user = service.get(user_id)
    enforce(authorize(admin, Action.DELETE_USER, user))
    service.delete(user)
    return MessageResponse(message="User deleted successfully")
