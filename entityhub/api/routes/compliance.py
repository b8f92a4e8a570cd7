"""
Compliance cycle endpoints.

Trigger a cycle on demand (the scheduler normally does this through
manage.py run-cycle) and preview who would be reminded of what.
"""

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from entityhub.api.dependencies import (
    get_now,
    get_run_cycle_use_case,
    get_send_reminders_use_case,
)
from entityhub.application.dto.requests import RunCycleRequest
from entityhub.application.dto.responses import (
    ComplianceRunResponse,
    ErrorResponse,
    ReminderBucketResponse,
    ReminderItemResponse,
    ReminderPreviewResponse,
)
from entityhub.application.use_cases import RunComplianceCycleUseCase, SendTaskRemindersUseCase
from entityhub.core.entities.reminder import ReminderItem
from entityhub.core.services.filing_status import humanize_due, start_of_day

router = APIRouter(prefix="/api/compliance", tags=["compliance"])


def _item_to_response(item: ReminderItem, as_of: date) -> ReminderItemResponse:
    return ReminderItemResponse(
        task_id=item.task_id,
        title=item.task.title,
        entity_name=item.entity_name,
        filing_title=item.filing_title,
        due_date=item.task.due_date,
        due_label=humanize_due(item.task.due_date, as_of),
        priority=item.task.priority,
    )


@router.post(
    "/run",
    response_model=ComplianceRunResponse,
    responses={500: {"model": ErrorResponse}},
)
async def run_cycle(
    request: RunCycleRequest | None = None,
    use_case: RunComplianceCycleUseCase = Depends(get_run_cycle_use_case),
    now: datetime = Depends(get_now),
) -> ComplianceRunResponse:
    """
    Run one compliance cycle.

    Advances filed recurring filings, then sends reminder digests. Per-item
    failures are reported in the body; only a failure to read the
    candidate filings fails the request.
    """
    request = request or RunCycleRequest()
    report = await use_case.execute(
        now=request.as_of or now,
        horizon_days=request.horizon_days,
        timeout_seconds=request.timeout_seconds,
    )
    return ComplianceRunResponse.model_validate(report.model_dump())


@router.get("/reminders/preview", response_model=ReminderPreviewResponse)
async def preview_reminders(
    horizon_days: int | None = Query(default=None, ge=0, le=365),
    as_of: date | None = None,
    use_case: SendTaskRemindersUseCase = Depends(get_send_reminders_use_case),
    now: datetime = Depends(get_now),
) -> ReminderPreviewResponse:
    """Show the reminder buckets the next cycle would send, without sending."""
    as_of = as_of or start_of_day(now)
    selection = await use_case.preview(as_of, horizon_days)

    buckets = []
    for recipient_id in selection.recipient_ids:
        recipient = selection.recipient(recipient_id)
        buckets.append(
            ReminderBucketResponse(
                recipient_id=recipient_id,
                name=recipient.display_name if recipient else recipient_id,
                email=recipient.email if recipient else None,
                tasks=[_item_to_response(i, as_of) for i in selection.buckets[recipient_id]],
            )
        )

    return ReminderPreviewResponse(
        outcome=selection.outcome,
        as_of=as_of,
        horizon_days=selection.horizon_days,
        tasks_found=selection.tasks_found,
        buckets=buckets,
    )
