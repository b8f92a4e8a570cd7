"""
Live filing status and task priority.

Pure functions shared by the read API and the scheduler. Every function
takes the caller's "now" explicitly and never touches the wall clock, so
results are deterministic and safe to call concurrently with batch passes.
"""

from datetime import UTC, date, datetime

from entityhub.core.entities.filing import DisplayStatus, FilingStatus
from entityhub.core.entities.task import TaskPriority

# Upper bounds (inclusive) in days until due
URGENT_WITHIN_DAYS = 7
HIGH_WITHIN_DAYS = 14
MEDIUM_WITHIN_DAYS = 30


def start_of_day(now: date | datetime) -> date:
    """Calendar date of now (aware datetimes use their own zone)."""
    if isinstance(now, datetime):
        return now.date()
    return now


def days_until(due_date: date, now: date | datetime) -> int:
    """Whole calendar days from today to due_date, negative once overdue."""
    return (due_date - start_of_day(now)).days


def derive_status(
    due_date: date,
    persisted_status: FilingStatus | DisplayStatus | str,
    now: date | datetime,
) -> DisplayStatus:
    """
    Map a stored due date and status to the status shown to users.

    Filed is sticky. Anything else becomes overdue once the due date is
    before the start of today, and is returned unchanged otherwise.
    """
    status = DisplayStatus(getattr(persisted_status, "value", persisted_status))
    if status == DisplayStatus.FILED:
        return DisplayStatus.FILED
    if due_date < start_of_day(now):
        return DisplayStatus.OVERDUE
    return status


def priority_for_days(days: int) -> TaskPriority:
    """Priority tier for a number of days until due."""
    if days <= URGENT_WITHIN_DAYS:
        return TaskPriority.URGENT
    if days <= HIGH_WITHIN_DAYS:
        return TaskPriority.HIGH
    if days <= MEDIUM_WITHIN_DAYS:
        return TaskPriority.MEDIUM
    return TaskPriority.LOW


def classify_priority(due_date: date, now: date | datetime) -> TaskPriority:
    """Seed priority for a task due on due_date."""
    return priority_for_days(days_until(due_date, now))


def humanize_due(due_date: date, now: date | datetime) -> str:
    """Short relative label: Today, Tomorrow, N days, N days overdue."""
    days = days_until(due_date, now)
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    if days < 0:
        overdue = abs(days)
        return f"{overdue} day{'s' if overdue != 1 else ''} overdue"
    return f"{days} days"


def urgency_level(days: int) -> str:
    """Digest colour band: critical (<=2 days), warning (<=5), normal."""
    if days <= 2:
        return "critical"
    if days <= 5:
        return "warning"
    return "normal"


def to_naive_utc(now: date | datetime) -> datetime:
    """Naive UTC datetime for storage timestamps (dates become midnight)."""
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            return now.astimezone(UTC).replace(tzinfo=None)
        return now
    return datetime(now.year, now.month, now.day)
