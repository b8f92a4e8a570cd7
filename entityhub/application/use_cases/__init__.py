"""Application use cases."""

from entityhub.application.use_cases.advance_recurring_filings import (
    AdvanceRecurringFilingsUseCase,
    AdvanceResult,
)
from entityhub.application.use_cases.complete_filing import (
    CompleteFilingResult,
    CompleteFilingUseCase,
)
from entityhub.application.use_cases.complete_task import CompleteTaskUseCase
from entityhub.application.use_cases.run_compliance_cycle import RunComplianceCycleUseCase
from entityhub.application.use_cases.send_task_reminders import (
    ReminderRunResult,
    SendTaskRemindersUseCase,
)

__all__ = [
    "AdvanceRecurringFilingsUseCase",
    "AdvanceResult",
    "SendTaskRemindersUseCase",
    "ReminderRunResult",
    "RunComplianceCycleUseCase",
    "CompleteFilingUseCase",
    "CompleteFilingResult",
    "CompleteTaskUseCase",
]
