"""
Entity filing endpoints.

Every filing response carries display_status, the status as of the
request time, next to the persisted status.
"""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, status

from entityhub.api.dependencies import (
    get_advance_use_case,
    get_complete_filing_use_case,
    get_dir,
    get_filings,
    get_now,
    get_tasks,
    get_type_store,
)
from entityhub.api.routes.tasks import task_to_response
from entityhub.application.dto.requests import (
    CompleteFilingRequest,
    CreateFilingRequest,
    FilingStatusRequest,
    UpdateFilingRequest,
)
from entityhub.application.dto.responses import (
    CompleteFilingResponse,
    ErrorResponse,
    FilingListResponse,
    FilingResponse,
    FilingStatusResponse,
)
from entityhub.application.use_cases import AdvanceRecurringFilingsUseCase, CompleteFilingUseCase
from entityhub.config import get_logger
from entityhub.core.entities.filing import (
    DisplayStatus,
    EntityFiling,
    FilingFrequency,
    FilingStatus,
    FilingType,
)
from entityhub.core.exceptions import FilingNotFoundError, FilingTypeNotFoundError
from entityhub.core.interfaces.storage import (
    IDirectory,
    IFilingStore,
    IFilingTaskStore,
    IFilingTypeStore,
)
from entityhub.core.services.filing_status import (
    classify_priority,
    days_until,
    derive_status,
    humanize_due,
    start_of_day,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/filings", tags=["filings"])


def filing_to_response(filing: EntityFiling, now: date | datetime) -> FilingResponse:
    """Convert filing entity to response DTO."""
    return FilingResponse(
        id=filing.id or 0,
        entity_id=filing.entity_id,
        filing_type_id=filing.filing_type_id,
        title=filing.title,
        jurisdiction=filing.jurisdiction,
        due_date=filing.due_date,
        due_day=filing.due_day,
        filing_date=filing.filing_date,
        frequency=filing.frequency,
        amount=filing.amount,
        confirmation_number=filing.confirmation_number,
        filed_by=filing.filed_by,
        notes=filing.notes,
        status=filing.status,
        display_status=(
            derive_status(filing.due_date, filing.status, now)
            if filing.due_date is not None
            else DisplayStatus(filing.status.value)
        ),
        days_until_due=days_until(filing.due_date, now) if filing.due_date is not None else None,
        reminder_days=filing.reminder_days,
        created_at=filing.created_at,
        updated_at=filing.updated_at,
    )


async def _check_references(
    entity_id: int | None,
    filing_type_id: int | None,
    directory: IDirectory,
    type_store: IFilingTypeStore,
) -> FilingType | None:
    if entity_id is not None and await directory.get_entity(entity_id) is None:
        raise HTTPException(status_code=404, detail="Entity not found")
    if filing_type_id is None:
        return None
    filing_type = await type_store.get(filing_type_id)
    if filing_type is None:
        raise FilingTypeNotFoundError(filing_type_id)
    return filing_type


@router.post(
    "",
    response_model=FilingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_filing(
    request: CreateFilingRequest,
    store: IFilingStore = Depends(get_filings),
    type_store: IFilingTypeStore = Depends(get_type_store),
    directory: IDirectory = Depends(get_dir),
    advancer: AdvanceRecurringFilingsUseCase = Depends(get_advance_use_case),
    now: datetime = Depends(get_now),
) -> FilingResponse:
    """
    Create a filing for an entity.

    When due_day is omitted it is taken from the due date, so monthly
    and quarterly filings keep their day across short months. When
    frequency is omitted it is copied from the filing type.

    A filing that is not already filed gets its auto task right away,
    through the same path (type switch and dedup) the recurrence pass
    uses for later cycles.
    """
    filing_type = await _check_references(
        request.entity_id, request.filing_type_id, directory, type_store
    )

    data = request.model_dump()
    if data["due_day"] is None:
        data["due_day"] = request.due_date.day
    if data["frequency"] is None:
        data["frequency"] = (
            filing_type.default_frequency if filing_type is not None else FilingFrequency.ANNUAL
        )
    created = await store.create(EntityFiling(**data))
    response = filing_to_response(created, now)

    if created.status == FilingStatus.FILED:
        return response
    # The filing is committed; a failed task insert leaves auto_task_id unset
    try:
        task = await advancer.create_auto_task(created, now)
    except Exception as e:
        logger.warning(
            "auto_task_create_failed",
            filing_id=created.id,
            error=str(e),
            exc_info=True,
        )
        return response
    if task is not None:
        response.auto_task_id = task.id
    return response


@router.get("", response_model=FilingListResponse)
async def list_filings(
    entity_id: int | None = None,
    status: FilingStatus | None = None,
    limit: int = 100,
    offset: int = 0,
    store: IFilingStore = Depends(get_filings),
    now: datetime = Depends(get_now),
) -> FilingListResponse:
    """List filings by due date, optionally for one entity or stored status."""
    filings = await store.list_filings(
        entity_id=entity_id,
        status=status,
        limit=limit,
        offset=offset,
    )
    return FilingListResponse(
        filings=[filing_to_response(f, now) for f in filings],
        total=len(filings),
    )


@router.post("/status", response_model=FilingStatusResponse)
async def filing_status(
    request: FilingStatusRequest,
    now: datetime = Depends(get_now),
) -> FilingStatusResponse:
    """Live status for a due date and stored status, without a filing row."""
    as_of = request.as_of or start_of_day(now)
    return FilingStatusResponse(
        due_date=request.due_date,
        as_of=as_of,
        display_status=derive_status(request.due_date, request.status, as_of),
        days_until_due=days_until(request.due_date, as_of),
        due_label=humanize_due(request.due_date, as_of),
        suggested_priority=classify_priority(request.due_date, as_of),
    )


@router.get(
    "/{filing_id}",
    response_model=FilingResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_filing(
    filing_id: int,
    store: IFilingStore = Depends(get_filings),
    now: datetime = Depends(get_now),
) -> FilingResponse:
    filing = await store.get(filing_id)
    if filing is None:
        raise HTTPException(status_code=404, detail="Filing not found")
    return filing_to_response(filing, now)


@router.put(
    "/{filing_id}",
    response_model=FilingResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_filing(
    filing_id: int,
    request: UpdateFilingRequest,
    store: IFilingStore = Depends(get_filings),
    type_store: IFilingTypeStore = Depends(get_type_store),
    directory: IDirectory = Depends(get_dir),
    now: datetime = Depends(get_now),
) -> FilingResponse:
    existing = await store.get(filing_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Filing not found")

    changes = request.model_dump(exclude_unset=True)
    await _check_references(
        changes.get("entity_id"),
        changes.get("filing_type_id"),
        directory,
        type_store,
    )

    updated = await store.update(existing.model_copy(update=changes))
    return filing_to_response(updated, now)


@router.delete(
    "/{filing_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_filing(
    filing_id: int,
    unlink_tasks: bool = False,
    store: IFilingStore = Depends(get_filings),
    task_store: IFilingTaskStore = Depends(get_tasks),
) -> None:
    """
    Delete a filing.

    Refused with 409 while tasks reference it, unless unlink_tasks is
    set, in which case the tasks are kept and detached first.
    """
    if await store.get(filing_id) is None:
        raise FilingNotFoundError(filing_id)
    if unlink_tasks:
        await task_store.unlink_filing(filing_id)
    await store.delete(filing_id)


@router.post(
    "/{filing_id}/complete",
    response_model=CompleteFilingResponse,
    responses={404: {"model": ErrorResponse}},
)
async def complete_filing(
    filing_id: int,
    request: CompleteFilingRequest | None = None,
    use_case: CompleteFilingUseCase = Depends(get_complete_filing_use_case),
    now: datetime = Depends(get_now),
) -> CompleteFilingResponse:
    """Mark the current cycle as filed and close its auto-generated task."""
    request = request or CompleteFilingRequest()
    result = await use_case.execute(
        filing_id,
        filing_date=request.filing_date,
        confirmation_number=request.confirmation_number,
        filed_by=request.filed_by,
        now=now,
    )
    return CompleteFilingResponse(
        filing=filing_to_response(result.filing, now),
        closed_task=task_to_response(result.closed_task) if result.closed_task else None,
    )
