"""
Dependency injection container for FastAPI.

Provides store and use case instances to route handlers. Tests replace
these through app.dependency_overrides.
"""

from datetime import UTC, datetime
from functools import lru_cache

from entityhub.application.use_cases import (
    AdvanceRecurringFilingsUseCase,
    CompleteFilingUseCase,
    CompleteTaskUseCase,
    RunComplianceCycleUseCase,
    SendTaskRemindersUseCase,
)
from entityhub.config import Settings, get_settings
from entityhub.core.interfaces.storage import (
    IDirectory,
    IFilingStore,
    IFilingTaskStore,
    IFilingTypeStore,
)
from entityhub.infrastructure.storage.sqlite import (
    get_directory,
    get_filing_store,
    get_filing_type_store,
    get_task_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


def get_now() -> datetime:
    """Request time used for derived status and priorities."""
    return datetime.now(UTC)


# Store dependencies
async def get_type_store() -> IFilingTypeStore:
    """Get filing type store."""
    return await get_filing_type_store()


async def get_filings() -> IFilingStore:
    """Get filing store."""
    return await get_filing_store()


async def get_tasks() -> IFilingTaskStore:
    """Get filing task store."""
    return await get_task_store()


async def get_dir() -> IDirectory:
    """Get entity and recipient directory."""
    return await get_directory()


# Use case dependencies
def get_advance_use_case() -> AdvanceRecurringFilingsUseCase:
    """Get recurrence use case (its auto-task path is shared with filing creation)."""
    return AdvanceRecurringFilingsUseCase()


def get_complete_filing_use_case() -> CompleteFilingUseCase:
    """Get complete filing use case."""
    return CompleteFilingUseCase()


def get_complete_task_use_case() -> CompleteTaskUseCase:
    """Get complete task use case."""
    return CompleteTaskUseCase()


def get_run_cycle_use_case() -> RunComplianceCycleUseCase:
    """Get compliance cycle use case."""
    return RunComplianceCycleUseCase()


def get_send_reminders_use_case() -> SendTaskRemindersUseCase:
    """Get reminder use case (used for previews)."""
    return SendTaskRemindersUseCase()
