"""Admin user management."""

import logging

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.task import Task
from src.models.user import User
from src.services.auth import create_user, get_user_by_email

logger = logging.getLogger(__name__)


class UserService:
    """Service for listing, creating, updating and deleting users."""

    def __init__(self, db: Session):
        self.db = db

    def _task_counts(self, user_ids: list[int]) -> dict[int, int]:
        if not user_ids:
            return {}
        counts = (
            self.db.query(Task.user_id, func.count(Task.id))
            .filter(Task.user_id.in_(user_ids))
            .group_by(Task.user_id)
            .all()
        )
        return dict(counts)

    def task_count(self, user: User) -> int:
        return self._task_counts([user.id]).get(user.id, 0)

    def list_users(self, exclude_id: int | None = None) -> list[tuple[User, int]]:
        """All users except ``exclude_id``, newest first, with their task counts."""
        query = self.db.query(User)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        users = query.order_by(User.created_at.desc(), User.id.desc()).all()

        counts = self._task_counts([u.id for u in users])
        return [(user, counts.get(user.id, 0)) for user in users]

    def get(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    def create(self, email: str, password: str, is_admin: bool = False) -> User:
        if get_user_by_email(self.db, email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists with this email",
            )
        return create_user(self.db, email, password, is_admin=is_admin)

    def update(self, user_id: int, email: str | None = None, is_admin: bool | None = None) -> User:
        """Change a user's email and/or admin flag."""
        user = self.get(user_id)

        if email is not None and email != user.email:
            if get_user_by_email(self.db, email):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Email already taken",
                )
            user.email = email
        if is_admin is not None:
            user.is_admin = is_admin

        user.touch()
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        """Delete a user together with all of their tasks."""
        user_id = user.id
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user {user_id} and their tasks")
