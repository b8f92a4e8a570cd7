"""
Advance Recurring Filings Use Case.

Moves every filed, recurring filing to its next cycle and seeds an
auto-generated task for the new due date. Each filing is processed
independently: its outcome is recorded and the pass continues.
"""

import sqlite3
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from entityhub.config import get_logger, get_settings
from entityhub.config.settings import SchedulerSettings
from entityhub.core.entities.filing import EntityFiling
from entityhub.core.entities.run_report import ItemOutcome, ItemResult, RunError
from entityhub.core.entities.task import FilingTask, TaskStatus
from entityhub.core.exceptions import ConfigurationError, DatabaseError
from entityhub.core.interfaces.storage import (
    IDirectory,
    IFilingStore,
    IFilingTaskStore,
    IFilingTypeStore,
)
from entityhub.core.services.filing_status import classify_priority
from entityhub.core.services.recurrence import advance_filing

logger = get_logger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (DatabaseError, sqlite3.OperationalError, ConnectionError, TimeoutError)


@dataclass
class AdvanceResult:
    """Outcome of one recurrence pass."""

    considered: int = 0
    tasks_created: int = 0
    item_results: list[ItemResult] = field(default_factory=list)
    not_reached: list[int] = field(default_factory=list)
    errors: list[RunError] = field(default_factory=list)

    @property
    def advanced(self) -> int:
        return sum(1 for r in self.item_results if r.outcome == ItemOutcome.ADVANCED)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.item_results if r.outcome == ItemOutcome.SKIPPED)


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def auto_task_title(type_name: str | None, due_date: date, entity_name: str) -> str:
    return f"{type_name or 'Filing'} - {due_date.strftime('%B %Y')} ({entity_name})"


class AdvanceRecurringFilingsUseCase:
    """
    Use case for the recurrence pass of a compliance cycle.

    Reading the candidate set is the only step whose failure propagates.
    Everything after that is recorded per filing.
    """

    def __init__(
        self,
        filing_store: IFilingStore | None = None,
        task_store: IFilingTaskStore | None = None,
        filing_type_store: IFilingTypeStore | None = None,
        directory: IDirectory | None = None,
        settings: SchedulerSettings | None = None,
    ):
        self._filing_store = filing_store
        self._task_store = task_store
        self._type_store = filing_type_store
        self._directory = directory
        self._settings = settings or get_settings().scheduler

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

    async def _get_type_store(self) -> IFilingTypeStore:
        if self._type_store is None:
            from entityhub.infrastructure.storage.sqlite import get_filing_type_store
            self._type_store = await get_filing_type_store()
        return self._type_store

    async def _get_directory(self) -> IDirectory:
        if self._directory is None:
            from entityhub.infrastructure.storage.sqlite import get_directory
            self._directory = await get_directory()
        return self._directory

    def _get_retry_decorator(self) -> Any:
        delay = self._settings.retry_delay
        return retry(
            stop=stop_after_attempt(self._settings.store_max_retries),
            wait=wait_exponential(multiplier=delay, min=delay, max=delay * 8),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "store_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _with_retry(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        return await self._get_retry_decorator()(operation)(*args, **kwargs)

    async def execute(
        self,
        now: datetime | date,
        deadline: float | None = None,
    ) -> AdvanceResult:
        """
        Advance all filed recurring filings.

        Args:
            now: Point in time of the cycle, used for task priorities.
            deadline: Absolute time.monotonic() value; filings not started
                before it are reported as not reached.

        Returns:
            AdvanceResult with one ItemResult per processed filing.
        """
        filing_store = await self._get_filing_store()

        # Not caught: without a candidate set there is nothing to report on.
        candidates = await filing_store.list_advanceable()

        result = AdvanceResult(considered=len(candidates))

        for index, filing in enumerate(candidates):
            if deadline is not None and time.monotonic() >= deadline:
                result.not_reached = [f.id for f in candidates[index:] if f.id is not None]
                result.item_results.extend(
                    ItemResult(
                        filing_id=filing_id,
                        outcome=ItemOutcome.NOT_REACHED,
                        message="run deadline passed",
                    )
                    for filing_id in result.not_reached
                )
                logger.warning(
                    "advance_deadline_reached",
                    processed=index,
                    not_reached=len(result.not_reached),
                )
                break
            await self._process(filing, now, result)

        logger.info(
            "advance_recurring_complete",
            considered=result.considered,
            advanced=result.advanced,
            skipped=result.skipped,
            tasks_created=result.tasks_created,
            errors=len(result.errors),
        )
        return result

    @staticmethod
    def _record_error(
        result: AdvanceResult,
        filing: EntityFiling,
        outcome: ItemOutcome,
        kind: str,
        error_code: str,
        message: str,
    ) -> None:
        filing_id = filing.id or 0
        result.item_results.append(
            ItemResult(
                filing_id=filing_id,
                outcome=outcome,
                previous_due_date=_iso(filing.due_date),
                error_code=error_code,
                message=message,
            )
        )
        result.errors.append(RunError(item_id=str(filing_id), kind=kind, message=message))

    async def _process(
        self,
        filing: EntityFiling,
        now: datetime | date,
        result: AdvanceResult,
    ) -> None:
        filing_id = filing.id or 0
        try:
            await self._advance_one(filing, now, result)
        except ConfigurationError as e:
            logger.warning(
                "filing_advance_config_error",
                filing_id=filing_id,
                error_code=e.code,
                error=e.message,
            )
            self._record_error(
                result, filing, ItemOutcome.CONFIGURATION_ERROR, "configuration_error", e.code, e.message
            )
        except TRANSIENT_ERRORS as e:
            logger.error("filing_advance_failed", filing_id=filing_id, error=str(e))
            self._record_error(
                result,
                filing,
                ItemOutcome.TRANSIENT_ERROR,
                "transient_error",
                getattr(e, "code", type(e).__name__),
                str(e),
            )
        except Exception as e:
            # One bad record must not stop the remaining filings
            logger.exception("filing_advance_error", filing_id=filing_id, error_type=type(e).__name__)
            self._record_error(
                result,
                filing,
                ItemOutcome.FAILED,
                "item_error",
                getattr(e, "code", type(e).__name__),
                str(e) or type(e).__name__,
            )

    async def _advance_one(
        self,
        filing: EntityFiling,
        now: datetime | date,
        result: AdvanceResult,
    ) -> None:
        filing_id = filing.id or 0
        advanced = advance_filing(filing, now)

        filing_store = await self._get_filing_store()
        applied = await self._with_retry(
            filing_store.advance_if_filed,
            filing_id,
            filing.due_date,
            advanced.due_date,
        )

        if not applied:
            logger.info(
                "filing_advance_skipped",
                filing_id=filing_id,
                expected_due_date=_iso(filing.due_date),
            )
            result.item_results.append(
                ItemResult(
                    filing_id=filing_id,
                    outcome=ItemOutcome.SKIPPED,
                    previous_due_date=_iso(filing.due_date),
                    message="filing changed since it was read",
                )
            )
            return

        logger.info(
            "filing_advanced",
            filing_id=filing_id,
            previous_due_date=_iso(filing.due_date),
            new_due_date=_iso(advanced.due_date),
        )
        item = ItemResult(
            filing_id=filing_id,
            outcome=ItemOutcome.ADVANCED,
            previous_due_date=_iso(filing.due_date),
            new_due_date=_iso(advanced.due_date),
        )
        result.item_results.append(item)

        # The advancement is committed; a failed insert is reported only.
        try:
            task = await self._with_retry(self.create_auto_task, advanced, now)
        except Exception as e:
            logger.error("auto_task_create_failed", filing_id=filing_id, error=str(e))
            item.error_code = "AUTO_TASK_FAILED"
            item.message = str(e)
            result.errors.append(
                RunError(item_id=str(filing_id), kind="task_insert_error", message=str(e))
            )
            return

        if task is not None:
            item.task_id = task.id
            result.tasks_created += 1

    async def create_auto_task(
        self,
        filing: EntityFiling,
        now: datetime | date,
    ) -> FilingTask | None:
        """
        Insert the auto task for the filing's current cycle unless one exists.

        Returns None when the filing's type (or SCHEDULER_AUTO_GENERATE_TASKS
        for untyped filings) turns generation off, or the task already exists.
        """
        if filing.due_date is None:
            return None
        type_name: str | None = None
        generate = self._settings.auto_generate_tasks
        if filing.filing_type_id is not None:
            filing_type = await (await self._get_type_store()).get(filing.filing_type_id)
            if filing_type is not None:
                type_name = filing_type.name
                generate = filing_type.auto_generate_tasks
        if not generate:
            return None

        task_store = await self._get_task_store()
        existing = await task_store.find_auto_task(filing.id or 0, filing.due_date)
        if existing is not None:
            logger.info(
                "auto_task_exists",
                filing_id=filing.id,
                task_id=existing.id,
                due_date=filing.due_date.isoformat(),
            )
            return None

        names = await (await self._get_directory()).get_entity_names([filing.entity_id])
        entity_name = names.get(filing.entity_id, f"Entity {filing.entity_id}")

        task = FilingTask(
            entity_id=filing.entity_id,
            filing_id=filing.id,
            title=auto_task_title(type_name, filing.due_date, entity_name),
            description=f"Auto-generated task for: {filing.title}",
            due_date=filing.due_date,
            priority=classify_priority(filing.due_date, now),
            status=TaskStatus.PENDING,
            assigned_to=self._settings.default_assignee,
            is_auto_generated=True,
        )
        return await task_store.create(task)
