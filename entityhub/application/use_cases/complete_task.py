"""
Complete Task Use Case.
"""

from datetime import UTC, date, datetime

from entityhub.config import get_logger
from entityhub.core.entities.task import FilingTask, TaskStatus
from entityhub.core.exceptions import TaskNotFoundError
from entityhub.core.interfaces.storage import IFilingTaskStore
from entityhub.core.services.filing_status import to_naive_utc

logger = get_logger(__name__)


class CompleteTaskUseCase:
    """Mark a task completed and stamp completed_at."""

    def __init__(self, task_store: IFilingTaskStore | None = None):
        self._task_store = task_store

    async def _get_task_store(self) -> IFilingTaskStore:
        if self._task_store is None:
            from entityhub.infrastructure.storage.sqlite import get_task_store
            self._task_store = await get_task_store()
        return self._task_store

    async def execute(
        self,
        task_id: int,
        now: datetime | date | None = None,
    ) -> FilingTask:
        """
        Complete a task. Completing an already completed task is a no-op.

        Raises:
            TaskNotFoundError: task does not exist.
        """
        task_store = await self._get_task_store()
        task = await task_store.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        if task.status == TaskStatus.COMPLETED:
            return task

        task.status = TaskStatus.COMPLETED
        task.completed_at = to_naive_utc(now or datetime.now(UTC))
        updated = await task_store.update(task)
        logger.info("task_completed", task_id=task_id, filing_id=task.filing_id)
        return updated
