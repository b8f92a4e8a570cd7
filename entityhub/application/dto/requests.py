"""
Request DTOs for API endpoints.

Validated by pydantic before reaching a route handler.
"""

from datetime import date

from pydantic import BaseModel, Field

from entityhub.core.entities.filing import FilingCategory, FilingFrequency, FilingStatus
from entityhub.core.entities.task import TaskPriority, TaskStatus


class CreateFilingTypeRequest(BaseModel):
    """Request to add a filing type to the catalog."""

    code: str = Field(..., min_length=1, max_length=50, description="Unique short code")
    name: str = Field(..., min_length=1, max_length=200)
    default_frequency: FilingFrequency = FilingFrequency.ANNUAL
    category: FilingCategory = FilingCategory.OTHER
    description: str | None = None
    auto_generate_tasks: bool = Field(
        default=True,
        description="Create a task when a filing of this type rolls to its next cycle",
    )


class UpdateFilingTypeRequest(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    default_frequency: FilingFrequency | None = None
    category: FilingCategory | None = None
    description: str | None = None
    auto_generate_tasks: bool | None = None


class CreateFilingRequest(BaseModel):
    """Request to create an entity filing."""

    entity_id: int
    filing_type_id: int | None = None
    title: str = Field(..., min_length=1, max_length=300)
    jurisdiction: str | None = None
    due_date: date
    due_day: int | None = Field(
        default=None,
        ge=1,
        le=31,
        description="Day of month the obligation falls on; clamped in short months",
    )
    frequency: FilingFrequency | None = Field(
        default=None,
        description="Defaults to the filing type's default_frequency, else annual",
    )
    amount: float = Field(default=0.0, ge=0)
    status: FilingStatus = FilingStatus.PENDING
    filing_date: date | None = None
    confirmation_number: str | None = None
    filed_by: str | None = None
    notes: str | None = None
    reminder_days: int = Field(default=30, ge=1, le=365)


class UpdateFilingRequest(BaseModel):
    entity_id: int | None = None
    filing_type_id: int | None = None
    title: str | None = Field(default=None, min_length=1, max_length=300)
    jurisdiction: str | None = None
    due_date: date | None = None
    due_day: int | None = Field(default=None, ge=1, le=31)
    frequency: FilingFrequency | None = None
    amount: float | None = Field(default=None, ge=0)
    status: FilingStatus | None = None
    filing_date: date | None = None
    confirmation_number: str | None = None
    filed_by: str | None = None
    notes: str | None = None
    reminder_days: int | None = Field(default=None, ge=1, le=365)


class CompleteFilingRequest(BaseModel):
    """Mark the current cycle of a filing as submitted."""

    filing_date: date | None = Field(default=None, description="Defaults to today")
    confirmation_number: str | None = None
    filed_by: str | None = None


class FilingStatusRequest(BaseModel):
    """Live status lookup for a due date and stored status."""

    due_date: date
    status: str = Field(default="pending", pattern="^(pending|filed|overdue)$")
    as_of: date | None = Field(default=None, description="Evaluate as of this date")


class CreateTaskRequest(BaseModel):
    """Request to create a filing task."""

    entity_id: int
    filing_id: int | None = None
    title: str = Field(..., min_length=1, max_length=300)
    description: str | None = None
    due_date: date
    priority: TaskPriority | None = Field(
        default=None,
        description="Seeded from days until due when omitted",
    )
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: str | None = None


class UpdateTaskRequest(BaseModel):
    entity_id: int | None = None
    filing_id: int | None = None
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = None
    due_date: date | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    assigned_to: str | None = None
    unlink_filing: bool = Field(default=False, description="Clear filing_id")


class RunCycleRequest(BaseModel):
    """Trigger one compliance cycle."""

    horizon_days: int | None = Field(default=None, ge=0, le=365)
    timeout_seconds: float | None = Field(default=None, gt=0)
    as_of: date | None = Field(default=None, description="Run as of this date")


class CreateEntityRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    fiscal_year_end: str | None = Field(default=None, pattern=r"^\d{2}-\d{2}$")


class UpsertRecipientRequest(BaseModel):
    name: str | None = None
    email: str | None = Field(default=None, max_length=320)
    role: str = "admin"
    is_active: bool = True
