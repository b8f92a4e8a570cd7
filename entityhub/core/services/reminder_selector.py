"""
Reminder Selector.

Finds open tasks due within the reminder horizon and partitions them by
responsible person. Assigned tasks go to their assignee only; unassigned
tasks (or tasks assigned to someone who cannot receive mail) fan out to
every valid recipient. Buckets are keyed by task id, so a task appears at
most once per recipient.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from entityhub.config import get_logger
from entityhub.core.entities.directory import Recipient
from entityhub.core.entities.reminder import (
    ReminderItem,
    ReminderSelection,
    SelectionOutcome,
)
from entityhub.core.entities.task import OPEN_TASK_STATUSES
from entityhub.core.interfaces.storage import IDirectory, IFilingTaskStore
from entityhub.core.services.filing_status import start_of_day

logger = get_logger(__name__)

# Widest per-filing reminder window accepted on a filing
MAX_FILING_REMINDER_DAYS = 365


def partition_reminders(
    items: Iterable[ReminderItem],
    recipients: Iterable[Recipient],
) -> dict[str, list[ReminderItem]]:
    """
    Partition due items into per-recipient buckets.

    Invalid recipients are ignored. Each bucket is ordered by due date,
    then task id.
    """
    valid = [r for r in recipients if r.is_valid]
    valid_ids = {r.id for r in valid}

    buckets: dict[str, dict[int, ReminderItem]] = {r.id: {} for r in valid}

    for item in items:
        assignee = item.task.assigned_to
        if assignee and assignee in valid_ids:
            targets = [assignee]
        else:
            targets = [r.id for r in valid]
        for recipient_id in targets:
            buckets[recipient_id].setdefault(item.task_id, item)

    return {
        recipient_id: sorted(
            by_task.values(), key=lambda i: (i.task.due_date, i.task_id)
        )
        for recipient_id, by_task in buckets.items()
        if by_task
    }


def within_window(
    item: ReminderItem,
    today: date,
    horizon_days: int,
    honor_filing_reminder_days: bool = False,
) -> bool:
    """Check whether an item's due date falls inside its reminder window."""
    window = horizon_days
    if honor_filing_reminder_days and item.filing_reminder_days is not None:
        window = item.filing_reminder_days
    return today <= item.task.due_date <= today + timedelta(days=window)


class ReminderSelector:
    """
    Layer-pure service selecting reminder buckets for one cycle.

    Depends only on core interfaces.
    """

    def __init__(
        self,
        task_store: IFilingTaskStore,
        directory: IDirectory,
        honor_filing_reminder_days: bool = False,
    ) -> None:
        self._task_store = task_store
        self._directory = directory
        self._honor_filing_days = honor_filing_reminder_days

    async def select(
        self,
        now: date | datetime,
        horizon_days: int,
    ) -> ReminderSelection:
        """
        Select due items per recipient.

        Args:
            now: Point in time the cycle runs at.
            horizon_days: Days ahead (inclusive) a task may be due.

        Returns:
            ReminderSelection with buckets and the valid recipients.
        """
        today = start_of_day(now)
        query_days = horizon_days
        if self._honor_filing_days:
            query_days = max(horizon_days, MAX_FILING_REMINDER_DAYS)

        candidates = await self._task_store.list_due_between(
            start=today,
            end=today + timedelta(days=query_days),
            statuses=OPEN_TASK_STATUSES,
        )
        items = [
            item
            for item in candidates
            if item.task.status in OPEN_TASK_STATUSES
            and within_window(item, today, horizon_days, self._honor_filing_days)
        ]

        selection = ReminderSelection(horizon_days=horizon_days, tasks_found=len(items))

        if not items:
            selection.outcome = SelectionOutcome.NO_DUE_TASKS
            logger.info(
                "reminder_no_due_tasks",
                today=today.isoformat(),
                horizon_days=horizon_days,
            )
            return selection

        recipients = [
            r for r in await self._directory.list_recipients() if r.is_valid
        ]
        if not recipients:
            selection.outcome = SelectionOutcome.NO_RECIPIENTS
            logger.warning(
                "reminder_no_recipients",
                tasks_found=len(items),
                horizon_days=horizon_days,
            )
            return selection

        selection.recipients = recipients
        selection.buckets = partition_reminders(items, recipients)

        logger.info(
            "reminder_selection_complete",
            tasks_found=len(items),
            recipients=len(selection.buckets),
        )
        return selection
