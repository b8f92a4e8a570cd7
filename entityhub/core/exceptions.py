"""
Domain exceptions for the compliance engine.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class EntityHubError(Exception):
    """Base exception for all engine errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(EntityHubError):
    """Base exception for storage operations."""

    pass


class FilingNotFoundError(StorageError):
    """Entity filing not found in storage."""

    def __init__(self, filing_id: int):
        super().__init__(
            f"Filing not found: {filing_id}",
            code="FILING_NOT_FOUND",
            details={"filing_id": filing_id},
        )


class FilingTypeNotFoundError(StorageError):
    """Filing type not found in storage."""

    def __init__(self, filing_type_id: int):
        super().__init__(
            f"Filing type not found: {filing_type_id}",
            code="FILING_TYPE_NOT_FOUND",
            details={"filing_type_id": filing_type_id},
        )


class TaskNotFoundError(StorageError):
    """Filing task not found in storage."""

    def __init__(self, task_id: int):
        super().__init__(
            f"Task not found: {task_id}",
            code="TASK_NOT_FOUND",
            details={"task_id": task_id},
        )


class FilingHasTasksError(StorageError):
    """Filing is still referenced by tasks and cannot be deleted."""

    def __init__(self, filing_id: int, task_count: int):
        super().__init__(
            f"Filing {filing_id} is referenced by {task_count} task(s)",
            code="FILING_HAS_TASKS",
            details={"filing_id": filing_id, "task_count": task_count},
        )


class FilingTypeInUseError(StorageError):
    """Filing type is referenced by filings and cannot be deleted."""

    def __init__(self, filing_type_id: int, filing_count: int):
        super().__init__(
            f"Filing type {filing_type_id} is used by {filing_count} filing(s)",
            code="FILING_TYPE_IN_USE",
            details={"filing_type_id": filing_type_id, "filing_count": filing_count},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Configuration Exceptions
class ConfigurationError(EntityHubError):
    """Configuration error, either in settings or on a single record."""

    pass


class InvalidDueDayError(ConfigurationError):
    """due_day anchor is outside 1-31."""

    def __init__(self, due_day: Any, filing_id: int | None = None):
        super().__init__(
            f"Invalid due_day {due_day!r}, expected 1-31",
            code="INVALID_DUE_DAY",
            details={"due_day": due_day, "filing_id": filing_id},
        )


class InvalidDueDateError(ConfigurationError):
    """Due date is missing, unreadable, or its next cycle is not a valid date."""

    def __init__(self, due_date: Any, reason: str, filing_id: int | None = None):
        super().__init__(
            f"Invalid due_date {due_date!r}: {reason}",
            code="INVALID_DUE_DATE",
            details={"due_date": str(due_date) if due_date is not None else None,
                     "filing_id": filing_id, "reason": reason},
        )


class InvalidFrequencyError(ConfigurationError):
    """Recurrence frequency is missing or unknown."""

    def __init__(self, frequency: Any, filing_id: int | None = None):
        super().__init__(
            f"Invalid recurrence frequency: {frequency!r}",
            code="INVALID_FREQUENCY",
            details={"frequency": frequency, "filing_id": filing_id},
        )


class RecurrenceNotApplicableError(ConfigurationError):
    """Filing cannot be advanced (one-time, or not filed)."""

    def __init__(self, filing_id: int | None, reason: str):
        super().__init__(
            f"Filing {filing_id} cannot be advanced: {reason}",
            code="RECURRENCE_NOT_APPLICABLE",
            details={"filing_id": filing_id, "reason": reason},
        )


# Notification Exceptions
class NotificationError(EntityHubError):
    """Base exception for reminder delivery."""

    pass


class TransportError(NotificationError):
    """Notification transport failed to accept a message."""

    def __init__(self, provider: str, reason: str, status_code: int | None = None):
        super().__init__(
            f"Notification transport '{provider}' failed: {reason}",
            code="TRANSPORT_ERROR",
            details={"provider": provider, "reason": reason, "status_code": status_code},
        )


# Validation Exceptions
class ValidationError(EntityHubError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )

