"""Task model."""

from sqlalchemy import CheckConstraint, Column, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import TaskStatus
from src.models.mixins import TimestampMixin

TITLE_MAX_LENGTH = 200


class Task(Base, TimestampMixin):
    """A unit of work owned by exactly one user."""

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint("total_minutes >= 0", name="ck_tasks_total_minutes_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(TaskStatus, name="task_status"),
        nullable=False,
        default=TaskStatus.TODO,
        index=True,
    )
    total_minutes = Column(Integer, nullable=False, default=0)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    user = relationship("User", back_populates="tasks")
