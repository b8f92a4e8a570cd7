"""Tests for task, directory and reminder entities."""

from datetime import date

from entityhub.core.entities.directory import Recipient
from entityhub.core.entities.reminder import ReminderItem, ReminderSelection, SelectionOutcome
from entityhub.core.entities.run_report import (
    ComplianceRunReport,
    ItemOutcome,
    ItemResult,
    RunPhase,
)
from entityhub.core.entities.task import FilingTask, TaskPriority, TaskStatus


class TestFilingTask:
    def test_create_minimal(self):
        task = FilingTask(entity_id=1, title="File annual report", due_date=date(2025, 4, 1))
        assert task.status == TaskStatus.PENDING
        assert task.priority == TaskPriority.MEDIUM
        assert task.filing_id is None
        assert task.is_auto_generated is False
        assert task.is_open is True

    def test_open_statuses(self):
        assert TaskStatus.PENDING.is_open
        assert TaskStatus.IN_PROGRESS.is_open
        assert not TaskStatus.COMPLETED.is_open
        assert not TaskStatus.CANCELLED.is_open


class TestRecipient:
    def test_valid_admin(self):
        recipient = Recipient(id="u1", name="Ada", email="ada@example.com")
        assert recipient.is_valid is True
        assert recipient.display_name == "Ada"

    def test_without_email_is_invalid(self):
        assert Recipient(id="u1", name="Ada").is_valid is False

    def test_inactive_is_invalid(self):
        assert Recipient(id="u1", email="a@x.com", is_active=False).is_valid is False

    def test_non_admin_is_invalid(self):
        assert Recipient(id="u1", email="a@x.com", role="viewer").is_valid is False

    def test_display_name_falls_back_to_email_local_part(self):
        assert Recipient(id="u1", email="grace.hopper@example.com").display_name == "grace.hopper"
        assert Recipient(id="u1").display_name == "User"


class TestReminderSelection:
    def test_recipient_lookup(self):
        u1 = Recipient(id="u1", email="a@x.com")
        selection = ReminderSelection(horizon_days=7, recipients=[u1])
        assert selection.recipient("u1") is u1
        assert selection.recipient("missing") is None
        assert selection.outcome == SelectionOutcome.OK

    def test_recipient_ids_skip_empty_buckets(self):
        item = ReminderItem(task=FilingTask(id=1, entity_id=1, title="t", due_date=date(2025, 1, 1)))
        selection = ReminderSelection(horizon_days=7, buckets={"u1": [item], "u2": []})
        assert selection.recipient_ids == ["u1"]
        assert item.task_id == 1


class TestRunReport:
    def test_item_result_error_flag(self):
        assert ItemResult(filing_id=1, outcome=ItemOutcome.CONFIGURATION_ERROR).is_error
        assert ItemResult(filing_id=1, outcome=ItemOutcome.TRANSIENT_ERROR).is_error
        assert not ItemResult(filing_id=1, outcome=ItemOutcome.SKIPPED).is_error
        assert not ItemResult(filing_id=1, outcome=ItemOutcome.NOT_REACHED).is_error

    def test_summary_counts(self, now):
        report = ComplianceRunReport(
            run_id="abc",
            started_at=now,
            as_of="2025-03-20",
            horizon_days=7,
            filings_advanced=2,
            not_reached=[4, 5],
        )
        summary = report.summary()
        assert summary["run_id"] == "abc"
        assert summary["phase"] == RunPhase.START.value
        assert summary["filings_advanced"] == 2
        assert summary["not_reached"] == 2
