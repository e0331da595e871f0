"""Task API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_current_user, get_task_service
from src.models.user import User
from src.schemas.auth import MessageResponse
from src.schemas.task import (
    TaskCreate,
    TaskEnvelope,
    TaskListResponse,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from src.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _envelope(task) -> TaskEnvelope:
    return TaskEnvelope(task=TaskResponse.model_validate(task))


@router.get("", response_model=TaskListResponse)
def list_tasks(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
    status_filter: str | None = Query(default=None, alias="status"),
    user_id: str | None = Query(default=None, alias="userId", description="Admin only"),
):
    """Get the caller's tasks, or every task for admins."""
    tasks = service.list_tasks(current_user, status_filter=status_filter, user_id=user_id)
    logger.info(f"Listed {len(tasks)} tasks for user {current_user.id}")
    return TaskListResponse(tasks=[TaskResponse.model_validate(t) for t in tasks])


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Create a new task."""
    task = service.create(task_data, current_user)
    logger.info(f"User {current_user.id} created task {task.id} for user {task.user_id}")
    return _envelope(task)


@router.get("/{task_id}", response_model=TaskEnvelope)
def get_task(
    task_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Get a specific task."""
    return _envelope(service.get(task_id, current_user))


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Update a task. Only the fields sent are changed."""
    return _envelope(service.update(task_id, task_data, current_user))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Permanently delete a task."""
    service.delete(task_id, current_user)
    return MessageResponse(message="Task deleted successfully")


@router.patch("/status/{task_id}", response_model=TaskEnvelope)
def update_task_status(
    task_id: int,
    status_data: TaskStatusUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Set a task's status."""
    task = service.set_status(task_id, status_data.status, current_user)
    logger.info(f"Task {task.id} status set to {task.status} by user {current_user.id}")
    return _envelope(task)


@router.post("/status/{task_id}", response_model=TaskEnvelope)
def advance_task_status(
    task_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Cycle a task's status (TODO -> IN_PROGRESS -> DONE -> TODO)."""
    task, _previous, _current = service.advance(task_id, current_user)
    return _envelope(task)
