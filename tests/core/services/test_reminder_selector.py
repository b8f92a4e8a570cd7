"""Tests for reminder selection and partitioning."""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from entityhub.core.entities.directory import Recipient
from entityhub.core.entities.reminder import ReminderItem, SelectionOutcome
from entityhub.core.entities.task import OPEN_TASK_STATUSES, FilingTask, TaskStatus
from entityhub.core.services.reminder_selector import (
    ReminderSelector,
    partition_reminders,
    within_window,
)

TODAY = date(2025, 3, 20)


def _make_item(
    task_id: int,
    days: int,
    assigned_to: str | None = None,
    status: TaskStatus = TaskStatus.PENDING,
    filing_reminder_days: int | None = None,
) -> ReminderItem:
    return ReminderItem(
        task=FilingTask(
            id=task_id,
            entity_id=1,
            title=f"Task {task_id}",
            due_date=TODAY + timedelta(days=days),
            assigned_to=assigned_to,
            status=status,
        ),
        entity_name="Acme Holdings LLC",
        filing_reminder_days=filing_reminder_days,
    )


def _recipient(recipient_id: str, **overrides) -> Recipient:
    data = {"id": recipient_id, "name": recipient_id.upper(), "email": f"{recipient_id}@example.com"}
    data.update(overrides)
    return Recipient(**data)


def _ids(items: list[ReminderItem]) -> list[int]:
    return [i.task_id for i in items]


class TestPartitionReminders:
    """Pure partitioning of due items per recipient."""

    def test_assigned_task_goes_only_to_assignee(self):
        """Task due in 5 days assigned to U is only in U's bucket."""
        buckets = partition_reminders(
            [_make_item(1, 5, assigned_to="u")],
            [_recipient("u"), _recipient("v")],
        )
        assert _ids(buckets["u"]) == [1]
        assert "v" not in buckets

    def test_unassigned_task_fans_out_once_per_recipient(self):
        """Unassigned task due in 3 days is in both buckets exactly once."""
        buckets = partition_reminders(
            [_make_item(1, 3)],
            [_recipient("u1"), _recipient("u2")],
        )
        assert _ids(buckets["u1"]) == [1]
        assert _ids(buckets["u2"]) == [1]

    def test_duplicate_items_are_collapsed(self):
        item = _make_item(1, 3, assigned_to="u1")
        buckets = partition_reminders([item, item, _make_item(1, 3)], [_recipient("u1")])
        assert _ids(buckets["u1"]) == [1]

    def test_assignee_not_a_valid_recipient_fans_out(self):
        buckets = partition_reminders(
            [_make_item(1, 3, assigned_to="ghost")],
            [_recipient("u1"), _recipient("u2")],
        )
        assert set(buckets) == {"u1", "u2"}

    def test_invalid_recipients_are_ignored(self):
        buckets = partition_reminders(
            [_make_item(1, 3, assigned_to="inactive")],
            [_recipient("inactive", is_active=False), _recipient("noemail", email=None), _recipient("ok")],
        )
        assert set(buckets) == {"ok"}

    def test_bucket_order(self):
        items = [_make_item(3, 4), _make_item(2, 1), _make_item(1, 4)]
        buckets = partition_reminders(items, [_recipient("u")])
        assert _ids(buckets["u"]) == [2, 1, 3]

    def test_no_recipients(self):
        assert partition_reminders([_make_item(1, 3)], []) == {}


class TestWithinWindow:
    def test_inclusive_bounds(self):
        assert within_window(_make_item(1, 0), TODAY, 7)
        assert within_window(_make_item(1, 7), TODAY, 7)
        assert not within_window(_make_item(1, 8), TODAY, 7)
        assert not within_window(_make_item(1, -1), TODAY, 7)

    def test_filing_override(self):
        item = _make_item(1, 20, filing_reminder_days=30)
        assert not within_window(item, TODAY, 7)
        assert within_window(item, TODAY, 7, honor_filing_reminder_days=True)


class TestReminderSelector:
    """Tests for ReminderSelector.select."""

    def _make_selector(self, items, recipients, honor: bool = False):
        task_store = AsyncMock()
        task_store.list_due_between = AsyncMock(return_value=items)
        directory = AsyncMock()
        directory.list_recipients = AsyncMock(return_value=recipients)
        selector = ReminderSelector(task_store, directory, honor_filing_reminder_days=honor)
        return selector, task_store, directory

    async def test_queries_inclusive_window(self):
        selector, task_store, _ = self._make_selector([], [])

        await selector.select(TODAY, 7)

        task_store.list_due_between.assert_awaited_once_with(
            start=TODAY,
            end=TODAY + timedelta(days=7),
            statuses=OPEN_TASK_STATUSES,
        )

    async def test_no_due_tasks(self):
        selector, _, directory = self._make_selector([], [_recipient("u")])

        selection = await selector.select(TODAY, 7)

        assert selection.outcome == SelectionOutcome.NO_DUE_TASKS
        assert selection.buckets == {}
        directory.list_recipients.assert_not_awaited()

    async def test_no_recipients(self):
        selector, _, _ = self._make_selector(
            [_make_item(1, 2)],
            [_recipient("u", is_active=False)],
        )

        selection = await selector.select(TODAY, 7)

        assert selection.outcome == SelectionOutcome.NO_RECIPIENTS
        assert selection.tasks_found == 1
        assert selection.buckets == {}

    async def test_buckets_and_recipients(self):
        selector, _, _ = self._make_selector(
            [_make_item(1, 5, assigned_to="u"), _make_item(2, 3)],
            [_recipient("u"), _recipient("v")],
        )

        selection = await selector.select(TODAY, 7)

        assert selection.outcome == SelectionOutcome.OK
        assert selection.tasks_found == 2
        assert _ids(selection.buckets["u"]) == [2, 1]
        assert _ids(selection.buckets["v"]) == [2]
        assert {r.id for r in selection.recipients} == {"u", "v"}

    async def test_closed_tasks_are_dropped(self):
        selector, _, _ = self._make_selector(
            [_make_item(1, 2, status=TaskStatus.COMPLETED), _make_item(2, 2)],
            [_recipient("u")],
        )

        selection = await selector.select(TODAY, 7)

        assert _ids(selection.buckets["u"]) == [2]

    @pytest.mark.parametrize("honor,expected", [(False, [1]), (True, [1, 2])])
    async def test_filing_reminder_days(self, honor, expected):
        items = [
            _make_item(1, 3),
            _make_item(2, 20, filing_reminder_days=30),
            _make_item(3, 20),
        ]
        selector, task_store, _ = self._make_selector(items, [_recipient("u")], honor=honor)

        selection = await selector.select(TODAY, 7)

        assert _ids(selection.buckets["u"]) == expected
        if honor:
            end = task_store.list_due_between.await_args.kwargs["end"]
            assert end == TODAY + timedelta(days=365)
