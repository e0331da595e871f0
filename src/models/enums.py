"""Enums for model fields."""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Lifecycle states of a task."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    def next(self) -> "TaskStatus":
        """Status reached by advancing: TODO -> IN_PROGRESS -> DONE -> TODO."""
        return _NEXT_STATUS[self]

    @classmethod
    def parse(cls, value: str | None) -> "TaskStatus | None":
        """Return the matching status, or None for anything that isn't one."""
        try:
            return cls(value)
        except ValueError:
            return None


_NEXT_STATUS = {
    TaskStatus.TODO: TaskStatus.IN_PROGRESS,
    TaskStatus.IN_PROGRESS: TaskStatus.DONE,
    TaskStatus.DONE: TaskStatus.TODO,
}
