"""Core domain entities."""

from entityhub.core.entities.directory import Entity, Recipient
from entityhub.core.entities.filing import (
    DisplayStatus,
    EntityFiling,
    FilingCategory,
    FilingFrequency,
    FilingStatus,
    FilingType,
)
from entityhub.core.entities.reminder import (
    DeliveryResult,
    DigestMessage,
    ReminderItem,
    ReminderSelection,
    SelectionOutcome,
)
from entityhub.core.entities.run_report import (
    ComplianceRunReport,
    ItemOutcome,
    ItemResult,
    RunError,
    RunPhase,
)
from entityhub.core.entities.task import (
    OPEN_TASK_STATUSES,
    FilingTask,
    TaskPriority,
    TaskStatus,
)

__all__ = [
    # Filing entities
    "FilingType",
    "EntityFiling",
    "FilingFrequency",
    "FilingStatus",
    "FilingCategory",
    "DisplayStatus",
    # Task entities
    "FilingTask",
    "TaskPriority",
    "TaskStatus",
    "OPEN_TASK_STATUSES",
    # Directory entities
    "Entity",
    "Recipient",
    # Reminder entities
    "ReminderItem",
    "ReminderSelection",
    "SelectionOutcome",
    "DigestMessage",
    "DeliveryResult",
    # Run report
    "ComplianceRunReport",
    "ItemOutcome",
    "ItemResult",
    "RunError",
    "RunPhase",
]
