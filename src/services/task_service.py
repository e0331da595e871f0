"""Task lifecycle: creation, ownership checks, status changes and listing."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from src.models.enums import TaskStatus
from src.models.task import Task
from src.models.user import User
from src.schemas.task import TaskCreate, TaskUpdate
from src.services.authorization import (
    Action,
    authorize,
    enforce,
    resolve_task_owner,
    scope_task_owner,
)

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task CRUD and state transitions on behalf of a caller."""

    def __init__(self, db: Session):
        self.db = db

    def _load(self, task_id: int) -> Task:
        task = (
            self.db.query(Task).options(joinedload(Task.user)).filter(Task.id == task_id).first()
        )
        if not task:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
        return task

    def _authorized(self, task_id: int, caller: User, action: Action) -> Task:
        """Load a task and check the caller may act on it (404 before 403)."""
        task = self._load(task_id)
        enforce(authorize(caller, action, task))
        return task

    def _ensure_user_exists(self, user_id: int) -> None:
        if self.db.query(User.id).filter(User.id == user_id).first() is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    def _save(self, task: Task) -> Task:
        task.touch()
        self.db.commit()
        self.db.refresh(task)
        return task

    def create(self, data: TaskCreate, caller: User) -> Task:
        """Create a task in TODO, owned by the caller or (for admins) the requested user."""
        owner_id = resolve_task_owner(caller, data.user_id)
        if owner_id != caller.id:
            self._ensure_user_exists(owner_id)

        task = Task(
            title=data.title,
            description=data.description,
            total_minutes=data.total_minutes,
            status=TaskStatus.TODO,
            user_id=owner_id,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def get(self, task_id: int, caller: User) -> Task:
        """Get a task the caller may read."""
        return self._authorized(task_id, caller, Action.READ)

    def update(self, task_id: int, patch: TaskUpdate, caller: User) -> Task:
        """Apply the fields present in ``patch``; absent fields are left alone."""
        task = self._authorized(task_id, caller, Action.UPDATE)
        changes = patch.model_dump(exclude_unset=True)

        if "user_id" in changes:
            owner_id = resolve_task_owner(caller, changes.pop("user_id"))
            if owner_id != task.user_id:
                self._ensure_user_exists(owner_id)
                task.user_id = owner_id

        for field, value in changes.items():
            setattr(task, field, value)

        return self._save(task)

    def set_status(self, task_id: int, new_status: TaskStatus, caller: User) -> Task:
        """Move a task directly to ``new_status``; any state may follow any other."""
        task = self._authorized(task_id, caller, Action.UPDATE)
        task.status = new_status
        return self._save(task)

    def advance(self, task_id: int, caller: User) -> tuple[Task, TaskStatus, TaskStatus]:
        """Move a task one step around TODO -> IN_PROGRESS -> DONE -> TODO.

        Returns:
            (task, previous_status, new_status)
        """
        task = self._authorized(task_id, caller, Action.UPDATE)
        previous = TaskStatus(task.status)
        task.status = previous.next()
        task = self._save(task)
        logger.info(f"Task {task.id} status {previous} -> {task.status} by user {caller.id}")
        return task, previous, TaskStatus(task.status)

    def delete(self, task_id: int, caller: User) -> None:
        """Permanently delete a task."""
        task = self._authorized(task_id, caller, Action.DELETE)
        self.db.delete(task)
        self.db.commit()

    def list_tasks(
        self,
        caller: User,
        status_filter: str | None = None,
        user_id: int | str | None = None,
    ) -> list[Task]:
        """List visible tasks, newest first.

        Non-admins only ever see their own tasks, so their ``user_id`` is
        ignored unparsed. An unknown status value is ignored rather than
        rejected.
        """
        query = self.db.query(Task).options(joinedload(Task.user))

        requested_owner = None
        if user_id is not None and authorize(caller, Action.LIST_ALL_TASKS).allowed:
            try:
                requested_owner = int(user_id)
            except ValueError:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid userId filter"
                ) from None

        owner_id = scope_task_owner(caller, requested_owner)
        if owner_id is not None:
            query = query.filter(Task.user_id == owner_id)

        task_status = TaskStatus.parse(status_filter)
        if task_status is not None:
            query = query.filter(Task.status == task_status)

        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()
