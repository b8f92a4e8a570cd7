"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from entityhub.application.dto.requests import (
    CompleteFilingRequest,
    CreateEntityRequest,
    CreateFilingRequest,
    CreateFilingTypeRequest,
    CreateTaskRequest,
    FilingStatusRequest,
    RunCycleRequest,
    UpdateFilingRequest,
    UpdateFilingTypeRequest,
    UpdateTaskRequest,
    UpsertRecipientRequest,
)
from entityhub.application.dto.responses import (
    CompleteFilingResponse,
    ComplianceRunResponse,
    EntityResponse,
    ErrorResponse,
    FilingListResponse,
    FilingResponse,
    FilingStatusResponse,
    FilingTypeListResponse,
    FilingTypeResponse,
    HealthResponse,
    ProviderHealthResponse,
    RecipientListResponse,
    RecipientResponse,
    ReminderPreviewResponse,
    TaskListResponse,
    TaskResponse,
)

__all__ = [
    # Requests
    "CreateFilingTypeRequest",
    "UpdateFilingTypeRequest",
    "CreateFilingRequest",
    "UpdateFilingRequest",
    "CompleteFilingRequest",
    "FilingStatusRequest",
    "CreateTaskRequest",
    "UpdateTaskRequest",
    "RunCycleRequest",
    "CreateEntityRequest",
    "UpsertRecipientRequest",
    # Responses
    "FilingTypeResponse",
    "FilingTypeListResponse",
    "FilingResponse",
    "FilingListResponse",
    "FilingStatusResponse",
    "CompleteFilingResponse",
    "TaskResponse",
    "TaskListResponse",
    "EntityResponse",
    "RecipientResponse",
    "RecipientListResponse",
    "ComplianceRunResponse",
    "ReminderPreviewResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
]
