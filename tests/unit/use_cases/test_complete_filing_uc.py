"""Unit tests for filing and task completion use cases."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock

import pytest

from entityhub.application.use_cases.complete_filing import CompleteFilingUseCase
from entityhub.application.use_cases.complete_task import CompleteTaskUseCase
from entityhub.core.entities.filing import EntityFiling, FilingFrequency, FilingStatus
from entityhub.core.entities.task import FilingTask, TaskStatus
from entityhub.core.exceptions import FilingNotFoundError, TaskNotFoundError

NOW = datetime(2025, 3, 20, 9, 30, tzinfo=UTC)


def _make_filed(**overrides) -> EntityFiling:
    data = {
        "id": 1,
        "entity_id": 10,
        "title": "Form 941",
        "due_date": date(2025, 3, 31),
        "frequency": FilingFrequency.QUARTERLY,
        "status": FilingStatus.FILED,
        "filing_date": date(2025, 3, 20),
    }
    data.update(overrides)
    return EntityFiling(**data)


def _make_task(**overrides) -> FilingTask:
    data = {
        "id": 7,
        "entity_id": 10,
        "filing_id": 1,
        "title": "Quarterly Payroll - March 2025 (Acme)",
        "due_date": date(2025, 3, 31),
        "is_auto_generated": True,
    }
    data.update(overrides)
    return FilingTask(**data)


def _make_stores(filing=None, auto_task=None):
    filing_store = AsyncMock()
    filing_store.mark_filed = AsyncMock(return_value=filing)
    task_store = AsyncMock()
    task_store.find_auto_task = AsyncMock(return_value=auto_task)
    task_store.update = AsyncMock(side_effect=lambda task: task)
    return filing_store, task_store


class TestCompleteFiling:
    async def test_marks_filed_with_defaults(self):
        filing_store, task_store = _make_stores(_make_filed())
        uc = CompleteFilingUseCase(filing_store, task_store)

        result = await uc.execute(1, confirmation_number="ABC-1", filed_by="  ", now=NOW)

        filing_store.mark_filed.assert_awaited_once_with(
            1,
            filing_date=date(2025, 3, 20),
            confirmation_number="ABC-1",
            filed_by=None,
        )
        assert result.filing.status == FilingStatus.FILED
        assert result.closed_task is None

    async def test_closes_open_auto_task(self):
        filing_store, task_store = _make_stores(_make_filed(), _make_task())
        uc = CompleteFilingUseCase(filing_store, task_store)

        result = await uc.execute(1, filing_date=date(2025, 3, 18), now=NOW)

        task_store.find_auto_task.assert_awaited_once_with(1, date(2025, 3, 31))
        assert result.closed_task.status == TaskStatus.COMPLETED
        assert result.closed_task.completed_at == datetime(2025, 3, 20, 9, 30)

    async def test_missing_filing(self):
        filing_store, task_store = _make_stores(None)
        uc = CompleteFilingUseCase(filing_store, task_store)

        with pytest.raises(FilingNotFoundError):
            await uc.execute(99, now=NOW)
        task_store.find_auto_task.assert_not_awaited()


class TestCompleteTask:
    async def test_completes_open_task(self):
        task_store = AsyncMock()
        task_store.get = AsyncMock(return_value=_make_task(status=TaskStatus.IN_PROGRESS))
        task_store.update = AsyncMock(side_effect=lambda task: task)

        task = await CompleteTaskUseCase(task_store).execute(7, now=NOW)

        assert task.status == TaskStatus.COMPLETED
        assert task.completed_at == datetime(2025, 3, 20, 9, 30)

    async def test_already_completed_is_noop(self):
        done = _make_task(status=TaskStatus.COMPLETED, completed_at=datetime(2025, 3, 1))
        task_store = AsyncMock()
        task_store.get = AsyncMock(return_value=done)

        task = await CompleteTaskUseCase(task_store).execute(7, now=NOW)

        assert task.completed_at == datetime(2025, 3, 1)
        task_store.update.assert_not_awaited()

    async def test_missing_task(self):
        task_store = AsyncMock()
        task_store.get = AsyncMock(return_value=None)

        with pytest.raises(TaskNotFoundError):
            await CompleteTaskUseCase(task_store).execute(404)
