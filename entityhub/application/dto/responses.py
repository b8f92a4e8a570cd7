"""
Response DTOs for API endpoints.

Structured output models for consistent API responses.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from entityhub.core.entities.filing import (
    DisplayStatus,
    FilingCategory,
    FilingFrequency,
    FilingStatus,
)
from entityhub.core.entities.reminder import SelectionOutcome
from entityhub.core.entities.run_report import ItemOutcome, RunPhase
from entityhub.core.entities.task import TaskPriority, TaskStatus


class ProviderHealthResponse(BaseModel):
    """Dependency health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    notifications: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. FILING_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


# --- Catalog ---


class FilingTypeResponse(BaseModel):
    id: int
    code: str
    name: str
    default_frequency: FilingFrequency
    category: FilingCategory
    description: str | None = None
    auto_generate_tasks: bool
    created_at: datetime
    updated_at: datetime


class FilingTypeListResponse(BaseModel):
    filing_types: list[FilingTypeResponse]
    total: int


# --- Filings ---


class FilingResponse(BaseModel):
    """Entity filing with its live status."""

    id: int
    entity_id: int
    filing_type_id: int | None = None
    title: str
    jurisdiction: str | None = None
    due_date: date | None = None
    due_day: int | None = None
    filing_date: date | None = None
    frequency: FilingFrequency | None = None
    amount: float = 0.0
    confirmation_number: str | None = None
    filed_by: str | None = None
    notes: str | None = None
    status: FilingStatus
    display_status: DisplayStatus = Field(..., description="Status as of the request time")
    days_until_due: int | None = Field(None, description="Negative once overdue")
    reminder_days: int
    auto_task_id: int | None = Field(None, description="Task generated when the filing was created")
    created_at: datetime
    updated_at: datetime


class FilingListResponse(BaseModel):
    filings: list[FilingResponse]
    total: int


class FilingStatusResponse(BaseModel):
    """Live status lookup result."""

    due_date: date
    as_of: date
    display_status: DisplayStatus
    days_until_due: int
    due_label: str
    suggested_priority: TaskPriority


# --- Tasks ---


class TaskResponse(BaseModel):
    id: int
    entity_id: int
    filing_id: int | None = None
    title: str
    description: str | None = None
    due_date: date
    priority: TaskPriority
    status: TaskStatus
    assigned_to: str | None = None
    is_auto_generated: bool
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    tasks: list[TaskResponse]
    total: int


class CompleteFilingResponse(BaseModel):
    filing: FilingResponse
    closed_task: TaskResponse | None = None


# --- Directory ---


class EntityResponse(BaseModel):
    id: int
    name: str
    fiscal_year_end: str | None = None
    created_at: datetime


class RecipientResponse(BaseModel):
    id: str
    name: str | None = None
    email: str | None = None
    role: str
    is_active: bool
    can_receive_reminders: bool


class RecipientListResponse(BaseModel):
    recipients: list[RecipientResponse]
    total: int


# --- Compliance cycle ---


class ItemResultResponse(BaseModel):
    filing_id: int
    outcome: ItemOutcome
    previous_due_date: str | None = None
    new_due_date: str | None = None
    task_id: int | None = None
    error_code: str | None = None
    message: str | None = None


class RunErrorResponse(BaseModel):
    item_id: str
    kind: str
    message: str


class DeliveryResponse(BaseModel):
    recipient_id: str
    email: str | None = None
    success: bool
    task_count: int = 0
    provider: str
    message_id: str | None = None
    error: str | None = None


class ComplianceRunResponse(BaseModel):
    """Report of one compliance cycle."""

    run_id: str
    phase: RunPhase
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
    errors: list[RunErrorResponse] = Field(default_factory=list)
    item_results: list[ItemResultResponse] = Field(default_factory=list)
    deliveries: list[DeliveryResponse] = Field(default_factory=list)


class ReminderItemResponse(BaseModel):
    task_id: int
    title: str
    entity_name: str | None = None
    filing_title: str | None = None
    due_date: date
    due_label: str
    priority: TaskPriority


class ReminderBucketResponse(BaseModel):
    recipient_id: str
    name: str
    email: str | None = None
    tasks: list[ReminderItemResponse]


class ReminderPreviewResponse(BaseModel):
    """Reminder selection without sending."""

    outcome: SelectionOutcome
    as_of: date
    horizon_days: int
    tasks_found: int
    buckets: list[ReminderBucketResponse] = Field(default_factory=list)
