"""
Error handling for the compliance API.

Every failure leaves the API as an ErrorResponse body carrying a stable
error_code, the message, a recovery hint and the request path. Domain
errors keep the code they were raised with; HTTPException and request
validation errors get a code derived from the status.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from entityhub.application.dto.responses import ErrorResponse
from entityhub.config import get_logger
from entityhub.core.exceptions import (
    ConfigurationError,
    EntityHubError,
    FilingHasTasksError,
    FilingTypeInUseError,
    NotificationError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)

# Most specific first: the not-found errors are StorageError subclasses
_STATUS_BY_TYPE: tuple[tuple[type[Exception], int], ...] = (
    (FilingHasTasksError, status.HTTP_409_CONFLICT),
    (FilingTypeInUseError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConfigurationError, 422),
    (NotificationError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ValueError, status.HTTP_400_BAD_REQUEST),
)

_HINTS: dict[str, str] = {
    "FILING_NOT_FOUND": "List filings with GET /api/filings and retry with an existing id.",
    "FILING_TYPE_NOT_FOUND": "List filing types with GET /api/filing-types.",
    "TASK_NOT_FOUND": "List tasks with GET /api/tasks and retry with an existing id.",
    "ENTITY_NOT_FOUND": "Create the entity with POST /api/entities first.",
    "FILING_HAS_TASKS": "Delete the filing's tasks or retry with ?unlink_tasks=true.",
    "FILING_TYPE_IN_USE": "Reassign or delete the filings that use this type first.",
    "INVALID_DUE_DAY": "due_day must be between 1 and 31.",
    "INVALID_FREQUENCY": "Use one of: one-time, monthly, quarterly, annual.",
    "RECURRENCE_NOT_APPLICABLE": "Only filed, recurring filings roll to a next cycle.",
    "MISSING_API_KEY": "Set NOTIFY_API_KEY or switch NOTIFY_PROVIDER to log.",
    "TRANSPORT_ERROR": "The email provider is unreachable. Retry later.",
    "VALIDATION_ERROR": "Compare the request body with the published API schema.",
    "DATABASE_ERROR": "The database is locked or unavailable. Retry shortly.",
}

_FALLBACK_HINTS: dict[int, str] = {
    400: "The request was rejected. Fix the parameters and retry.",
    404: "Nothing exists at this id.",
    409: "The resource is still referenced by other records.",
    422: "The input could not be processed.",
    500: "Unexpected server error. The request_id in the logs has details.",
    503: "A downstream service is unavailable. Retry later.",
}

# HTTPException details raised by the routes, e.g. "Filing type not found"
_NOT_FOUND_SUBJECTS = ("filing type", "filing", "task", "entity", "recipient")


def hint_for(error_code: str, status_code: int) -> str:
    return _HINTS.get(error_code) or _FALLBACK_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    for exc_type, code in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            return code
    if isinstance(exc, StorageError) and exc.code.endswith("_NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def code_for_http(status_code: int, detail: str) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        lowered = detail.lower()
        subject = next((s for s in _NOT_FOUND_SUBJECTS if s in lowered), None)
        return f"{subject.replace(' ', '_').upper()}_NOT_FOUND" if subject else "NOT_FOUND"
    return {400: "BAD_REQUEST", 409: "CONFLICT", 422: "UNPROCESSABLE_ENTITY"}.get(
        status_code, "HTTP_ERROR"
    )


def _json_error(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=hint_for(error_code, status_code),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an exception and render it as an ErrorResponse."""
    status_code = status_for(exc)
    if isinstance(exc, EntityHubError):
        error_code, message = exc.code, exc.message
        detail = ", ".join(f"{k}={v}" for k, v in exc.details.items() if v is not None) or None
    else:
        error_code, message, detail = type(exc).__name__, str(exc), None

    server_side = status_code >= 500
    (logger.error if server_side else logger.warning)(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        error_code=error_code,
        error=message,
        traceback=traceback.format_exc() if server_side else None,
    )
    return _json_error(request, status_code, error_code, message, detail)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last resort for exceptions no handler claimed."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(EntityHubError)
    async def on_domain_error(request: Request, exc: EntityHubError) -> JSONResponse:
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def on_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        return _json_error(
            request,
            422,
            "VALIDATION_ERROR",
            "Request validation failed",
            detail="; ".join(problems),
        )

    @app.exception_handler(HTTPException)
    async def on_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        detail = str(exc.detail or "")
        return _json_error(
            request,
            exc.status_code,
            code_for_http(exc.status_code, detail),
            detail or "An error occurred",
        )
