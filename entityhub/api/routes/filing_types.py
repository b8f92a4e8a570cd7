"""
Filing type catalog endpoints.
"""

from fastapi import APIRouter, Depends, status

from entityhub.api.dependencies import get_type_store
from entityhub.application.dto.requests import CreateFilingTypeRequest, UpdateFilingTypeRequest
from entityhub.application.dto.responses import (
    ErrorResponse,
    FilingTypeListResponse,
    FilingTypeResponse,
)
from entityhub.core.entities.filing import FilingType
from entityhub.core.exceptions import FilingTypeNotFoundError
from entityhub.core.interfaces.storage import IFilingTypeStore

router = APIRouter(prefix="/api/filing-types", tags=["filing-types"])


def _entity_to_response(filing_type: FilingType) -> FilingTypeResponse:
    return FilingTypeResponse(
        id=filing_type.id or 0,
        code=filing_type.code,
        name=filing_type.name,
        default_frequency=filing_type.default_frequency,
        category=filing_type.category,
        description=filing_type.description,
        auto_generate_tasks=filing_type.auto_generate_tasks,
        created_at=filing_type.created_at,
        updated_at=filing_type.updated_at,
    )


@router.post(
    "",
    response_model=FilingTypeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_filing_type(
    request: CreateFilingTypeRequest,
    store: IFilingTypeStore = Depends(get_type_store),
) -> FilingTypeResponse:
    """Add a filing type to the catalog."""
    created = await store.create(FilingType(**request.model_dump()))
    return _entity_to_response(created)


@router.get("", response_model=FilingTypeListResponse)
async def list_filing_types(
    limit: int = 100,
    offset: int = 0,
    store: IFilingTypeStore = Depends(get_type_store),
) -> FilingTypeListResponse:
    """List filing types by name."""
    types = await store.list_types(limit=limit, offset=offset)
    return FilingTypeListResponse(
        filing_types=[_entity_to_response(t) for t in types],
        total=len(types),
    )


@router.get(
    "/{filing_type_id}",
    response_model=FilingTypeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_filing_type(
    filing_type_id: int,
    store: IFilingTypeStore = Depends(get_type_store),
) -> FilingTypeResponse:
    filing_type = await store.get(filing_type_id)
    if filing_type is None:
        raise FilingTypeNotFoundError(filing_type_id)
    return _entity_to_response(filing_type)


@router.put(
    "/{filing_type_id}",
    response_model=FilingTypeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_filing_type(
    filing_type_id: int,
    request: UpdateFilingTypeRequest,
    store: IFilingTypeStore = Depends(get_type_store),
) -> FilingTypeResponse:
    existing = await store.get(filing_type_id)
    if existing is None:
        raise FilingTypeNotFoundError(filing_type_id)

    changes = request.model_dump(exclude_unset=True)
    updated = await store.update(existing.model_copy(update=changes))
    return _entity_to_response(updated)


@router.delete(
    "/{filing_type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_filing_type(
    filing_type_id: int,
    store: IFilingTypeStore = Depends(get_type_store),
) -> None:
    """Delete a filing type no filing uses."""
    if not await store.delete(filing_type_id):
        raise FilingTypeNotFoundError(filing_type_id)
