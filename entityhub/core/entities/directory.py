"""Legal entities and notification recipients (identity lookups)."""

from datetime import datetime

from pydantic import BaseModel, Field


class Entity(BaseModel):
    """A legal entity that owns filings and tasks."""

    id: int | None = None
    name: str
    fiscal_year_end: str | None = None  # MM-DD
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Recipient(BaseModel):
    """A responsible person who can receive reminder digests."""

    id: str
    name: str | None = None
    email: str | None = None
    role: str = "admin"
    is_active: bool = True

    @property
    def is_valid(self) -> bool:
        """Active admin with a known contact address."""
        return self.is_active and self.role == "admin" and bool(self.email)

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        if self.email:
            return self.email.split("@")[0]
        return "User"
