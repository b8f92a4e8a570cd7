"""API route modules."""

from entityhub.api.routes.compliance import router as compliance_router
from entityhub.api.routes.directory import router as directory_router
from entityhub.api.routes.filing_types import router as filing_types_router
from entityhub.api.routes.filings import router as filings_router
from entityhub.api.routes.health import router as health_router
from entityhub.api.routes.tasks import router as tasks_router

__all__ = [
    "health_router",
    "filing_types_router",
    "filings_router",
    "tasks_router",
    "compliance_router",
    "directory_router",
]
