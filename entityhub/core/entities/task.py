"""Filing task entity for actionable compliance work items."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class TaskStatus(str, Enum):
    """Task lifecycle status (separate from filing status)."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_open(self) -> bool:
        return self in (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)


class TaskPriority(str, Enum):
    """Task priority tier."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


OPEN_TASK_STATUSES: tuple[TaskStatus, ...] = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)


class FilingTask(BaseModel):
    """
    Actionable work item, always owned by an entity.

    May point at an EntityFiling through filing_id. That link is
    non-owning: removing it never removes the task.
    """

    id: int | None = None
    entity_id: int
    filing_id: int | None = None
    title: str
    description: str | None = None
    due_date: date
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: str | None = None
    is_auto_generated: bool = False
    completed_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_open(self) -> bool:
        return self.status.is_open
