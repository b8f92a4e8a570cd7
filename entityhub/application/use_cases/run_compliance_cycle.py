"""
Run Compliance Cycle Use Case.

One scheduler invocation: advance recurring filings, then select and
send reminder digests. Reminder selection starts only after every
advancement of the run has been committed, so tasks created in this run
are visible to it.
"""

import time
from datetime import UTC, date, datetime
from uuid import uuid4

from entityhub.application.use_cases.advance_recurring_filings import (
    AdvanceRecurringFilingsUseCase,
)
from entityhub.application.use_cases.send_task_reminders import SendTaskRemindersUseCase
from entityhub.config import bind_run_context, clear_run_context, get_logger, get_settings
from entityhub.config.settings import SchedulerSettings
from entityhub.core.entities.run_report import (
    ComplianceRunReport,
    RunError,
    RunPhase,
)
from entityhub.core.services.filing_status import start_of_day

logger = get_logger(__name__)


class RunComplianceCycleUseCase:
    """
    Scheduler driver.

    Phases run in order START, ADVANCE_RECURRING, SELECT_AND_NOTIFY and
    end in DONE, or ABORTED when the run deadline passed before the
    notify phase or the notify phase itself failed.
    """

    def __init__(
        self,
        advance_use_case: AdvanceRecurringFilingsUseCase | None = None,
        reminders_use_case: SendTaskRemindersUseCase | None = None,
        settings: SchedulerSettings | None = None,
    ):
        self._settings = settings or get_settings().scheduler
        self._advance = advance_use_case or AdvanceRecurringFilingsUseCase(
            settings=self._settings
        )
        self._reminders = reminders_use_case or SendTaskRemindersUseCase(
            settings=self._settings
        )

    async def execute(
        self,
        now: datetime | date | None = None,
        horizon_days: int | None = None,
        timeout_seconds: float | None = None,
    ) -> ComplianceRunReport:
        """
        Run one compliance cycle.

        Args:
            now: Point in time of the run (default: current UTC time).
            horizon_days: Reminder horizon (default from settings).
            timeout_seconds: Whole-run time limit in seconds (default from settings).

        Returns:
            ComplianceRunReport for the run.

        A failure of the reminder phase is recorded as a reminder_error and
        the report is returned with phase ABORTED.

        Raises:
            StorageError: the recurrence candidate set could not be read.
        """
        now = now or datetime.now(UTC)
        if horizon_days is None:
            horizon_days = self._settings.reminder_horizon_days
        if timeout_seconds is None:
            timeout_seconds = self._settings.timeout_seconds
        deadline = time.monotonic() + timeout_seconds if timeout_seconds is not None else None

        report = ComplianceRunReport(
            run_id=uuid4().hex[:12],
            started_at=datetime.now(UTC).replace(tzinfo=None),
            as_of=start_of_day(now).isoformat(),
            horizon_days=horizon_days,
        )

        bind_run_context(run_id=report.run_id)
        logger.info("compliance_cycle_started", as_of=report.as_of, horizon_days=horizon_days)
        try:
            await self._run(report, now, horizon_days, deadline)
        except Exception as e:
            report.phase = RunPhase.ABORTED
            report.finished_at = datetime.now(UTC).replace(tzinfo=None)
            logger.error(
                "compliance_cycle_failed",
                error=str(e),
                error_type=type(e).__name__,
                **report.summary(),
            )
            raise
        finally:
            clear_run_context("run_id")

        return report

    async def _run(
        self,
        report: ComplianceRunReport,
        now: datetime | date,
        horizon_days: int,
        deadline: float | None,
    ) -> None:
        report.phase = RunPhase.ADVANCE_RECURRING
        advanced = await self._advance.execute(now, deadline=deadline)

        report.filings_considered = advanced.considered
        report.filings_advanced = advanced.advanced
        report.filings_skipped = advanced.skipped
        report.tasks_created = advanced.tasks_created
        report.item_results = advanced.item_results
        report.not_reached = advanced.not_reached
        report.errors.extend(advanced.errors)

        if deadline is not None and time.monotonic() >= deadline:
            report.phase = RunPhase.ABORTED
            report.errors.append(
                RunError(
                    item_id="reminders",
                    kind="deadline",
                    message="run deadline passed before notifications",
                )
            )
            report.finished_at = datetime.now(UTC).replace(tzinfo=None)
            logger.warning("compliance_cycle_aborted", **report.summary())
            return

        report.phase = RunPhase.SELECT_AND_NOTIFY
        try:
            reminders = await self._reminders.execute(now, horizon_days)
        except Exception as e:
            # Committed advancements stay in the report
            report.phase = RunPhase.ABORTED
            report.errors.append(
                RunError(item_id="reminders", kind="reminder_error", message=str(e))
            )
            report.finished_at = datetime.now(UTC).replace(tzinfo=None)
            logger.error(
                "compliance_cycle_reminders_failed",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
                **report.summary(),
            )
            return

        report.selection_outcome = reminders.selection.outcome
        report.tasks_found = reminders.selection.tasks_found
        report.deliveries = reminders.deliveries
        report.recipients_notified = reminders.sent
        report.reminders_sent = reminders.sent
        report.reminder_failures = reminders.failed
        report.errors.extend(
            RunError(
                item_id=d.recipient_id,
                kind="delivery_error",
                message=d.error or "delivery failed",
            )
            for d in reminders.deliveries
            if not d.success
        )

        report.phase = RunPhase.DONE
        report.finished_at = datetime.now(UTC).replace(tzinfo=None)
        logger.info("compliance_cycle_complete", **report.summary())
