"""
Filing task endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status

from entityhub.api.dependencies import get_complete_task_use_case, get_now, get_tasks
from entityhub.application.dto.requests import CreateTaskRequest, UpdateTaskRequest
from entityhub.application.dto.responses import ErrorResponse, TaskListResponse, TaskResponse
from entityhub.application.use_cases import CompleteTaskUseCase
from entityhub.core.entities.task import FilingTask, TaskStatus
from entityhub.core.interfaces.storage import IFilingTaskStore
from entityhub.core.services.filing_status import classify_priority, to_naive_utc

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def task_to_response(task: FilingTask) -> TaskResponse:
    """Convert task entity to response DTO."""
    return TaskResponse(
        id=task.id or 0,
        entity_id=task.entity_id,
        filing_id=task.filing_id,
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        priority=task.priority,
        status=task.status,
        assigned_to=task.assigned_to,
        is_auto_generated=task.is_auto_generated,
        completed_at=task.completed_at,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    request: CreateTaskRequest,
    store: IFilingTaskStore = Depends(get_tasks),
    now: datetime = Depends(get_now),
) -> TaskResponse:
    """Create a task. Priority is seeded from days until due when omitted."""
    data = request.model_dump()
    if data["priority"] is None:
        data["priority"] = classify_priority(request.due_date, now)
    if request.status == TaskStatus.COMPLETED:
        data["completed_at"] = to_naive_utc(now)

    created = await store.create(FilingTask(**data))
    return task_to_response(created)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    entity_id: int | None = None,
    filing_id: int | None = None,
    status: TaskStatus | None = None,
    limit: int = 100,
    offset: int = 0,
    store: IFilingTaskStore = Depends(get_tasks),
) -> TaskListResponse:
    tasks = await store.list_tasks(
        entity_id=entity_id,
        filing_id=filing_id,
        status=status,
        limit=limit,
        offset=offset,
    )
    return TaskListResponse(tasks=[task_to_response(t) for t in tasks], total=len(tasks))


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_task(
    task_id: int,
    store: IFilingTaskStore = Depends(get_tasks),
) -> TaskResponse:
    task = await store.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task_to_response(task)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_task(
    task_id: int,
    request: UpdateTaskRequest,
    store: IFilingTaskStore = Depends(get_tasks),
    now: datetime = Depends(get_now),
) -> TaskResponse:
    """
    Update a task.

    Set unlink_filing to detach the task from its filing. Moving a task
    into or out of completed stamps or clears completed_at.
    """
    existing = await store.get(task_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Task not found")

    changes = request.model_dump(exclude_unset=True, exclude={"unlink_filing"})
    if request.unlink_filing:
        changes["filing_id"] = None

    new_status = changes.get("status")
    if new_status == TaskStatus.COMPLETED and existing.status != TaskStatus.COMPLETED:
        changes["completed_at"] = to_naive_utc(now)
    elif new_status is not None and new_status != TaskStatus.COMPLETED:
        changes["completed_at"] = None

    updated = await store.update(existing.model_copy(update=changes))
    return task_to_response(updated)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_task(
    task_id: int,
    store: IFilingTaskStore = Depends(get_tasks),
) -> None:
    if not await store.delete(task_id):
        raise HTTPException(status_code=404, detail="Task not found")


@router.post(
    "/{task_id}/complete",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}},
)
async def complete_task(
    task_id: int,
    use_case: CompleteTaskUseCase = Depends(get_complete_task_use_case),
    now: datetime = Depends(get_now),
) -> TaskResponse:
    task = await use_case.execute(task_id, now=now)
    return task_to_response(task)
