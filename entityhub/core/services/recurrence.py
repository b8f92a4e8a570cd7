"""
Recurrence date math for filings.

Calendar-aware: periods are counted in calendar months, and the day
anchor is clamped to the last valid day of the target month (a 31st
anchor lands on Apr 30, Feb 28 or Feb 29).
"""

import calendar
from datetime import date, datetime

from entityhub.core.entities.filing import EntityFiling, FilingFrequency, FilingStatus
from entityhub.core.exceptions import (
    InvalidDueDateError,
    InvalidDueDayError,
    InvalidFrequencyError,
    RecurrenceNotApplicableError,
)

PERIOD_MONTHS: dict[FilingFrequency, int] = {
    FilingFrequency.MONTHLY: 1,
    FilingFrequency.QUARTERLY: 3,
    FilingFrequency.ANNUAL: 12,
}


def _coerce_frequency(frequency: FilingFrequency | str | None) -> FilingFrequency:
    if isinstance(frequency, FilingFrequency):
        return frequency
    try:
        return FilingFrequency(frequency)
    except ValueError:
        raise InvalidFrequencyError(frequency)


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(start: date, months: int, anchor_day: int | None = None) -> date:
    """
    Shift start by whole calendar months.

    The result uses anchor_day (default start.day), clamped to the length
    of the target month.
    """
    day = anchor_day if anchor_day is not None else start.day
    if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 31:
        raise InvalidDueDayError(day)

    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    try:
        return date(year, month, min(day, last_day_of_month(year, month)))
    except (ValueError, OverflowError):
        raise InvalidDueDateError(start, f"shifting by {months} month(s) leaves the calendar range")


def advance_due_date(
    due_date: date,
    frequency: FilingFrequency | str | None,
    due_day: int | None = None,
) -> date:
    """
    Next cycle's due date, exactly one period after due_date.

    Raises:
        RecurrenceNotApplicableError: frequency is one-time
        InvalidFrequencyError: frequency missing or unknown
        InvalidDueDayError: due_day outside 1-31
        InvalidDueDateError: next cycle falls outside the supported calendar
    """
    freq = _coerce_frequency(frequency)
    if freq == FilingFrequency.ONE_TIME:
        raise RecurrenceNotApplicableError(None, "one-time filings do not recur")
    return add_months(due_date, PERIOD_MONTHS[freq], anchor_day=due_day)


def advance_filing(filing: EntityFiling, now: date | datetime | None = None) -> EntityFiling:
    """
    Return a copy of a filed, recurring filing reset to its next cycle.

    The input is not modified. The caller persists the copy through the
    store's conditional update so that a filing is advanced at most once
    per completion.
    """
    if filing.status != FilingStatus.FILED:
        raise RecurrenceNotApplicableError(filing.id, "persisted status is not filed")
    if filing.frequency is None:
        raise InvalidFrequencyError(None, filing_id=filing.id)
    if filing.due_date is None:
        raise InvalidDueDateError(None, "stored due date is missing or unreadable", filing_id=filing.id)

    try:
        new_due = advance_due_date(filing.due_date, filing.frequency, filing.due_day)
    except InvalidDueDayError as e:
        raise InvalidDueDayError(e.details["due_day"], filing_id=filing.id)
    except InvalidFrequencyError as e:
        raise InvalidFrequencyError(e.details["frequency"], filing_id=filing.id)
    except InvalidDueDateError as e:
        raise InvalidDueDateError(filing.due_date, e.details["reason"], filing_id=filing.id)
    except RecurrenceNotApplicableError:
        raise RecurrenceNotApplicableError(filing.id, "one-time filings do not recur")

    update: dict = {
        "due_date": new_due,
        "status": FilingStatus.PENDING,
        "filing_date": None,
        "confirmation_number": None,
    }
    if isinstance(now, datetime):
        update["updated_at"] = now.replace(tzinfo=None)
    return filing.model_copy(update=update)
