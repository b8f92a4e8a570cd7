"""Domain services (pure logic over core entities and interfaces)."""

from entityhub.core.services.digest_renderer import DigestRenderer
from entityhub.core.services.filing_status import (
    classify_priority,
    days_until,
    derive_status,
    humanize_due,
    priority_for_days,
    start_of_day,
    to_naive_utc,
    urgency_level,
)
from entityhub.core.services.notification_dispatcher import NotificationDispatcher
from entityhub.core.services.recurrence import (
    add_months,
    advance_due_date,
    advance_filing,
)
from entityhub.core.services.reminder_selector import (
    ReminderSelector,
    partition_reminders,
)

__all__ = [
    # Status and priority
    "derive_status",
    "classify_priority",
    "priority_for_days",
    "days_until",
    "start_of_day",
    "to_naive_utc",
    "humanize_due",
    "urgency_level",
    # Recurrence
    "add_months",
    "advance_due_date",
    "advance_filing",
    # Reminders
    "ReminderSelector",
    "partition_reminders",
    "DigestRenderer",
    "NotificationDispatcher",
]
