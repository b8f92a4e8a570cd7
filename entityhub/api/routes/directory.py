"""
Entity and recipient directory endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from entityhub.api.dependencies import get_dir
from entityhub.application.dto.requests import CreateEntityRequest, UpsertRecipientRequest
from entityhub.application.dto.responses import (
    EntityResponse,
    ErrorResponse,
    RecipientListResponse,
    RecipientResponse,
)
from entityhub.core.entities.directory import Entity, Recipient
from entityhub.core.interfaces.storage import IDirectory

router = APIRouter(prefix="/api", tags=["directory"])


def _recipient_to_response(recipient: Recipient) -> RecipientResponse:
    return RecipientResponse(
        id=recipient.id,
        name=recipient.name,
        email=recipient.email,
        role=recipient.role,
        is_active=recipient.is_active,
        can_receive_reminders=recipient.is_valid,
    )


@router.post(
    "/entities",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_entity(
    request: CreateEntityRequest,
    directory: IDirectory = Depends(get_dir),
) -> EntityResponse:
    entity = await directory.create_entity(Entity(**request.model_dump()))
    return EntityResponse(**entity.model_dump())


@router.get(
    "/entities/{entity_id}",
    response_model=EntityResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_entity(
    entity_id: int,
    directory: IDirectory = Depends(get_dir),
) -> EntityResponse:
    entity = await directory.get_entity(entity_id)
    if entity is None:
        raise HTTPException(status_code=404, detail="Entity not found")
    return EntityResponse(**entity.model_dump())


@router.put("/recipients/{recipient_id}", response_model=RecipientResponse)
async def upsert_recipient(
    recipient_id: str,
    request: UpsertRecipientRequest,
    directory: IDirectory = Depends(get_dir),
) -> RecipientResponse:
    """Create or replace a reminder recipient keyed by the task assignee id."""
    recipient = await directory.upsert_recipient(
        Recipient(id=recipient_id, **request.model_dump())
    )
    return _recipient_to_response(recipient)


@router.get("/recipients", response_model=RecipientListResponse)
async def list_recipients(
    include_inactive: bool = False,
    directory: IDirectory = Depends(get_dir),
) -> RecipientListResponse:
    recipients = await directory.list_recipients(include_inactive=include_inactive)
    return RecipientListResponse(
        recipients=[_recipient_to_response(r) for r in recipients],
        total=len(recipients),
    )
