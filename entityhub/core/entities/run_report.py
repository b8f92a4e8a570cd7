"""Per-item results and the summary report of a compliance cycle."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from entityhub.core.entities.reminder import DeliveryResult, SelectionOutcome


class ItemOutcome(str, Enum):
    """Tagged result of processing one filing in a batch pass."""

    ADVANCED = "advanced"
    SKIPPED = "skipped"
    CONFIGURATION_ERROR = "configuration_error"
    TRANSIENT_ERROR = "transient_error"
    NOT_REACHED = "not_reached"
    FAILED = "failed"


class RunPhase(str, Enum):
    """Scheduler driver state."""

    START = "start"
    ADVANCE_RECURRING = "advance_recurring"
    SELECT_AND_NOTIFY = "select_and_notify"
    DONE = "done"
    ABORTED = "aborted"


class ItemResult(BaseModel):
    """Result record for one processed filing."""

    filing_id: int
    outcome: ItemOutcome
    previous_due_date: str | None = None
    new_due_date: str | None = None
    task_id: int | None = None
    error_code: str | None = None
    message: str | None = None

    @property
    def is_error(self) -> bool:
        return self.outcome in (
            ItemOutcome.CONFIGURATION_ERROR,
            ItemOutcome.TRANSIENT_ERROR,
            ItemOutcome.FAILED,
        )


class RunError(BaseModel):
    """One error line of the pass summary."""

    item_id: str
    kind: str
    message: str


class ComplianceRunReport(BaseModel):
    """Summary of one scheduler invocation."""

    run_id: str
    phase: RunPhase = RunPhase.START
    started_at: datetime
    finished_at: datetime | None = None
    as_of: str
    horizon_days: int
    filings_considered: int = 0
    filings_advanced: int = 0
    filings_skipped: int = 0
    tasks_created: int = 0
    tasks_found: int = 0
    recipients_notified: int = 0
    reminders_sent: int = 0
    reminder_failures: int = 0
    selection_outcome: SelectionOutcome | None = None
    not_reached: list[int] = Field(default_factory=list)
    errors: list[RunError] = Field(default_factory=list)
    item_results: list[ItemResult] = Field(default_factory=list)
    deliveries: list[DeliveryResult] = Field(default_factory=list)

    def summary(self) -> dict[str, Any]:
        """Counts only, for logging."""
        return {
            "run_id": self.run_id,
            "phase": self.phase.value,
            "filings_advanced": self.filings_advanced,
            "filings_skipped": self.filings_skipped,
            "tasks_created": self.tasks_created,
            "reminders_sent": self.reminders_sent,
            "reminder_failures": self.reminder_failures,
            "not_reached": len(self.not_reached),
            "errors": len(self.errors),
        }
