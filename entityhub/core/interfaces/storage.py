"""
Abstract interfaces for storage providers.

Defines contracts for filing types, filings, tasks, and the directory of
entities and recipients.
"""

from abc import ABC, abstractmethod
from datetime import date

from entityhub.core.entities.directory import Entity, Recipient
from entityhub.core.entities.filing import EntityFiling, FilingStatus, FilingType
from entityhub.core.entities.reminder import ReminderItem
from entityhub.core.entities.task import (
    OPEN_TASK_STATUSES,
    FilingTask,
    TaskStatus,
)


class IFilingTypeStore(ABC):
    """Abstract interface for the filing type catalog."""

    @abstractmethod
    async def create(self, filing_type: FilingType) -> FilingType:
        """Create a filing type."""
        pass

    @abstractmethod
    async def get(self, filing_type_id: int) -> FilingType | None:
        """Get filing type by ID."""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> FilingType | None:
        """Get filing type by its unique code."""
        pass

    @abstractmethod
    async def update(self, filing_type: FilingType) -> FilingType:
        """Update a filing type."""
        pass

    @abstractmethod
    async def delete(self, filing_type_id: int) -> bool:
        """
        Delete a filing type.

        Raises FilingTypeInUseError while filings reference it.
        """
        pass

    @abstractmethod
    async def list_types(self, limit: int = 100, offset: int = 0) -> list[FilingType]:
        """List filing types ordered by name."""
        pass


class IFilingStore(ABC):
    """
    Abstract interface for entity filing storage.

    All writes are single-row; advance_if_filed is the conditional update
    used by the recurrence pass.
    """

    @abstractmethod
    async def create(self, filing: EntityFiling) -> EntityFiling:
        """Create a new filing."""
        pass

    @abstractmethod
    async def get(self, filing_id: int) -> EntityFiling | None:
        """Get filing by ID."""
        pass

    @abstractmethod
    async def update(self, filing: EntityFiling) -> EntityFiling:
        """Update an existing filing."""
        pass

    @abstractmethod
    async def delete(self, filing_id: int) -> bool:
        """
        Delete a filing.

        Raises FilingHasTasksError while tasks reference it.
        """
        pass

    @abstractmethod
    async def list_filings(
        self,
        entity_id: int | None = None,
        status: FilingStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[EntityFiling]:
        """List filings ordered by due date."""
        pass

    @abstractmethod
    async def list_advanceable(self, limit: int | None = None) -> list[EntityFiling]:
        """List filings with persisted status filed and a non one-time frequency, all of them by default."""
        pass

    @abstractmethod
    async def advance_if_filed(
        self,
        filing_id: int,
        expected_due_date: date,
        new_due_date: date,
    ) -> bool:
        """
        Move a filed filing to its next cycle.

        Applies only while the stored row still has status filed and the
        expected due date. Sets status pending and clears filing_date and
        confirmation_number. Returns False when the guard did not match.
        """
        pass

    @abstractmethod
    async def mark_filed(
        self,
        filing_id: int,
        filing_date: date,
        confirmation_number: str | None = None,
        filed_by: str | None = None,
    ) -> EntityFiling | None:
        """Record completion of the current cycle."""
        pass


class IFilingTaskStore(ABC):
    """Abstract interface for filing task storage."""

    @abstractmethod
    async def create(self, task: FilingTask) -> FilingTask:
        """Create a new task."""
        pass

    @abstractmethod
    async def get(self, task_id: int) -> FilingTask | None:
        """Get task by ID."""
        pass

    @abstractmethod
    async def update(self, task: FilingTask) -> FilingTask:
        """Update an existing task."""
        pass

    @abstractmethod
    async def delete(self, task_id: int) -> bool:
        """Delete a task by ID."""
        pass

    @abstractmethod
    async def list_tasks(
        self,
        entity_id: int | None = None,
        filing_id: int | None = None,
        status: TaskStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[FilingTask]:
        """List tasks ordered by due date."""
        pass

    @abstractmethod
    async def list_due_between(
        self,
        start: date,
        end: date,
        statuses: tuple[TaskStatus, ...] = OPEN_TASK_STATUSES,
    ) -> list[ReminderItem]:
        """
        List tasks due in [start, end] inclusive with the given statuses.

        Each item carries the entity name and linked filing title. Rows whose
        due date cannot be read are left out and logged.
        """
        pass

    @abstractmethod
    async def find_auto_task(self, filing_id: int, due_date: date) -> FilingTask | None:
        """Find a non-completed auto-generated task for a filing cycle."""
        pass

    @abstractmethod
    async def count_for_filing(self, filing_id: int) -> int:
        """Count tasks referencing a filing."""
        pass

    @abstractmethod
    async def unlink_filing(self, filing_id: int) -> int:
        """Detach all tasks from a filing without deleting them."""
        pass


class IDirectory(ABC):
    """Abstract interface for entity and recipient lookups."""

    @abstractmethod
    async def create_entity(self, entity: Entity) -> Entity:
        """Create a legal entity."""
        pass

    @abstractmethod
    async def get_entity(self, entity_id: int) -> Entity | None:
        """Get entity by ID."""
        pass

    @abstractmethod
    async def get_entity_names(self, entity_ids: list[int]) -> dict[int, str]:
        """Resolve entity ids to display names."""
        pass

    @abstractmethod
    async def upsert_recipient(self, recipient: Recipient) -> Recipient:
        """Create or replace a recipient."""
        pass

    @abstractmethod
    async def get_recipient(self, recipient_id: str) -> Recipient | None:
        """Get recipient by ID."""
        pass

    @abstractmethod
    async def list_recipients(self, include_inactive: bool = False) -> list[Recipient]:
        """List recipients."""
        pass
