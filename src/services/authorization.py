"""Role and ownership checks.

Every protected operation asks :func:`authorize` for a decision before it
touches the store, and :func:`enforce` turns a denial into the matching HTTP
error. The decision itself has no side effects.
"""

from dataclasses import dataclass
from enum import StrEnum

from fastapi import HTTPException, status

from src.models.task import Task
from src.models.user import User


class Action(StrEnum):
    """Things a caller may attempt."""

    ACCESS = "access"  # any authenticated endpoint
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    ASSIGN_TASK = "assign_task"
    LIST_ALL_TASKS = "list_all_tasks"
    MANAGE_USERS = "manage_users"
    DELETE_USER = "delete_user"


class DenyReason(StrEnum):
    """Why a request was refused."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    SELF_DELETE_FORBIDDEN = "self_delete_forbidden"


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check."""

    allowed: bool
    reason: DenyReason | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Decision":
        return cls(allowed=False, reason=reason)


TASK_ACTIONS = {Action.READ, Action.UPDATE, Action.DELETE}


def authorize(
    identity: User | None,
    action: Action,
    resource: Task | User | None = None,
) -> Decision:
    """Decide whether ``identity`` may perform ``action`` on ``resource``."""
    if identity is None:
        return Decision.deny(DenyReason.UNAUTHENTICATED)

    if action == Action.ACCESS:
        return Decision.allow()

    if action in TASK_ACTIONS:
        if identity.is_admin:
            return Decision.allow()
        if isinstance(resource, Task) and resource.user_id == identity.id:
            return Decision.allow()
        return Decision.deny(DenyReason.FORBIDDEN)

    if not identity.is_admin:
        return Decision.deny(DenyReason.FORBIDDEN)

    if action == Action.DELETE_USER and isinstance(resource, User) and resource.id == identity.id:
        return Decision.deny(DenyReason.SELF_DELETE_FORBIDDEN)

    # ASSIGN_TASK, LIST_ALL_TASKS, MANAGE_USERS, DELETE_USER on another account
    return Decision.allow()


def enforce(decision: Decision) -> None:
    """Raise the HTTP error matching a denial; do nothing when allowed."""
    if decision.allowed:
        return

    if decision.reason == DenyReason.UNAUTHENTICATED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if decision.reason == DenyReason.SELF_DELETE_FORBIDDEN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete your own account",
        )
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def resolve_task_owner(identity: User, requested_user_id: int | None) -> int:
    """Owner of a task created or reassigned by ``identity``.

    Non-admins always own what they create; a requested owner is ignored.
    """
    if requested_user_id is None:
        return identity.id
    if authorize(identity, Action.ASSIGN_TASK).allowed:
        return requested_user_id
    return identity.id


def scope_task_owner(identity: User, requested_user_id: int | None) -> int | None:
    """Owner filter for task listings. ``None`` means every owner."""
    if not authorize(identity, Action.LIST_ALL_TASKS).allowed:
        return identity.id
    return requested_user_id
