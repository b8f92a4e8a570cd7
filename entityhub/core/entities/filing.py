"""Filing type and entity filing entities."""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class FilingFrequency(str, Enum):
    """Recurrence period of an obligation."""

    ONE_TIME = "one-time"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"

    @property
    def is_recurring(self) -> bool:
        return self is not FilingFrequency.ONE_TIME


class FilingStatus(str, Enum):
    """Persisted (write-side) filing status."""

    PENDING = "pending"
    FILED = "filed"


class DisplayStatus(str, Enum):
    """Live status shown to users, derived at read time."""

    PENDING = "pending"
    FILED = "filed"
    OVERDUE = "overdue"


class FilingCategory(str, Enum):
    """Catalog category of a filing type."""

    STATE = "State"
    FEDERAL = "Federal"
    TAX = "Tax"
    CORPORATE = "Corporate"
    PAYROLL = "Payroll"
    OTHER = "Other"


class FilingType(BaseModel):
    """
    Catalog entry describing a class of obligation.

    Reference data maintained by administrators. Never deleted while a
    filing still points at it.
    """

    id: int | None = None
    code: str
    name: str
    default_frequency: FilingFrequency = FilingFrequency.ANNUAL
    category: FilingCategory = FilingCategory.OTHER
    description: str | None = None
    auto_generate_tasks: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class EntityFiling(BaseModel):
    """
    One obligation instance bound to one legal entity.

    The persisted status is advisory. Anything displayed to a user goes
    through derive_status so that "overdue" reflects the caller's clock.
    """

    id: int | None = None
    entity_id: int
    filing_type_id: int | None = None
    title: str
    jurisdiction: str | None = None
    due_date: date | None  # None only for stored rows whose date could not be read
    due_day: int | None = None
    filing_date: date | None = None
    frequency: FilingFrequency | None = FilingFrequency.ANNUAL
    amount: float = 0.0
    confirmation_number: str | None = None
    filed_by: str | None = None
    notes: str | None = None
    status: FilingStatus = FilingStatus.PENDING
    reminder_days: int = 30
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("status", mode="before")
    @classmethod
    def drop_derived_status(cls, v: Any) -> Any:
        # Legacy rows may carry the derived value; it is never a stored state.
        if v == DisplayStatus.OVERDUE.value or v is DisplayStatus.OVERDUE:
            return FilingStatus.PENDING
        return v

    @property
    def is_recurring(self) -> bool:
        return self.frequency is not None and self.frequency.is_recurring

    @property
    def is_filed(self) -> bool:
        return self.status == FilingStatus.FILED
