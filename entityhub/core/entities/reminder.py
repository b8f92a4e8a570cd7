"""Reminder entities: selected items, rendered digests, delivery results."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from entityhub.core.entities.directory import Recipient
from entityhub.core.entities.task import FilingTask


class SelectionOutcome(str, Enum):
    """Why a reminder pass did or did not produce digests."""

    OK = "ok"
    NO_DUE_TASKS = "no_due_tasks"
    NO_RECIPIENTS = "no_recipients"


class ReminderItem(BaseModel):
    """
    A due task enriched for rendering.

    Pure Pydantic model, not persisted. Built by the task store's
    due-window query (task joined with entity and filing).
    """

    task: FilingTask
    entity_name: str | None = None
    filing_title: str | None = None
    filing_reminder_days: int | None = None

    @property
    def task_id(self) -> int:
        return self.task.id or 0


class ReminderSelection(BaseModel):
    """Due items partitioned per recipient id."""

    outcome: SelectionOutcome = SelectionOutcome.OK
    horizon_days: int
    tasks_found: int = 0
    buckets: dict[str, list[ReminderItem]] = Field(default_factory=dict)
    recipients: list[Recipient] = Field(default_factory=list)

    @property
    def recipient_ids(self) -> list[str]:
        return [rid for rid, items in self.buckets.items() if items]

    def recipient(self, recipient_id: str) -> Recipient | None:
        return next((r for r in self.recipients if r.id == recipient_id), None)


class DigestMessage(BaseModel):
    """One rendered reminder digest for one recipient."""

    recipient_id: str
    to_email: str
    to_name: str
    subject: str
    html_body: str
    text_body: str
    task_ids: list[int] = Field(default_factory=list)


class DeliveryResult(BaseModel):
    """Outcome of handing one digest to the transport."""

    recipient_id: str
    email: str | None = None
    success: bool
    task_count: int = 0
    provider: str = "unknown"
    message_id: str | None = None
    error: str | None = None
    sent_at: datetime = Field(default_factory=datetime.utcnow)
