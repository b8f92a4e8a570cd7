"""
Complete Filing Use Case.

Records that the current cycle of a filing was submitted. The filing
keeps its due date; the next recurrence pass moves it to the next cycle.
The open auto-generated task for the completed cycle is closed with it.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime

from entityhub.config import get_logger
from entityhub.core.entities.filing import EntityFiling
from entityhub.core.entities.task import FilingTask, TaskStatus
from entityhub.core.exceptions import FilingNotFoundError
from entityhub.core.interfaces.storage import IFilingStore, IFilingTaskStore
from entityhub.core.services.filing_status import start_of_day, to_naive_utc

logger = get_logger(__name__)


@dataclass
class CompleteFilingResult:
    filing: EntityFiling
    closed_task: FilingTask | None = None


class CompleteFilingUseCase:
    """Use case for marking a filing as filed."""

    def __init__(
        self,
        filing_store: IFilingStore | None = None,
        task_store: IFilingTaskStore | None = None,
    ):
        self._filing_store = filing_store
        self._task_store = task_store

    async def _get_filing_store(self) -> IFilingStore:
        if self._filing_store is None:
            from entityhub.infrastructure.storage.sqlite import get_filing_store
            self._filing_store = await get_filing_store()
        return self._filing_store

    async def _get_task_store(self) -> IFilingTaskStore:
        if self._task_store is None:
            from entityhub.infrastructure.storage.sqlite import get_task_store
            self._task_store = await get_task_store()
        return self._task_store

    async def execute(
        self,
        filing_id: int,
        filing_date: date | None = None,
        confirmation_number: str | None = None,
        filed_by: str | None = None,
        now: datetime | date | None = None,
    ) -> CompleteFilingResult:
        """
        Mark a filing as filed.

        Args:
            filing_id: Filing to complete.
            filing_date: Submission date (default: today).
            confirmation_number: Receipt number from the authority.
            filed_by: Person who submitted it.
            now: Point in time of the request.

        Raises:
            FilingNotFoundError: filing does not exist.
        """
        now = now or datetime.now(UTC)
        filing_store = await self._get_filing_store()

        filing = await filing_store.mark_filed(
            filing_id,
            filing_date=filing_date or start_of_day(now),
            confirmation_number=confirmation_number,
            filed_by=(filed_by or "").strip() or None,
        )
        if filing is None:
            raise FilingNotFoundError(filing_id)

        result = CompleteFilingResult(filing=filing)

        task_store = await self._get_task_store()
        task = (
            await task_store.find_auto_task(filing_id, filing.due_date)
            if filing.due_date is not None
            else None
        )
        if task is not None and task.status.is_open:
            task.status = TaskStatus.COMPLETED
            task.completed_at = to_naive_utc(now)
            result.closed_task = await task_store.update(task)

        logger.info(
            "filing_completed",
            filing_id=filing_id,
            due_date=str(filing.due_date),
            closed_task_id=result.closed_task.id if result.closed_task else None,
        )
        return result

