"""
Application layer - use cases and DTOs.

Use cases coordinate core services and storage ports; DTOs are the
contracts between API handlers and use cases.
"""

from entityhub.application.use_cases import (
    AdvanceRecurringFilingsUseCase,
    CompleteFilingUseCase,
    CompleteTaskUseCase,
    RunComplianceCycleUseCase,
    SendTaskRemindersUseCase,
)

__all__ = [
    "AdvanceRecurringFilingsUseCase",
    "SendTaskRemindersUseCase",
    "RunComplianceCycleUseCase",
    "CompleteFilingUseCase",
    "CompleteTaskUseCase",
]
