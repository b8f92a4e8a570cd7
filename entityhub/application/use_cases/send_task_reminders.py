"""
Send Task Reminders Use Case.

Selects open tasks due within the horizon, partitions them per
responsible person and sends one digest to each.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from entityhub.config import get_logger, get_settings
from entityhub.config.settings import SchedulerSettings
from entityhub.core.entities.reminder import DeliveryResult, ReminderSelection
from entityhub.core.interfaces.notification import INotificationTransport
from entityhub.core.interfaces.storage import IDirectory, IFilingTaskStore
from entityhub.core.services.digest_renderer import DigestRenderer
from entityhub.core.services.notification_dispatcher import NotificationDispatcher
from entityhub.core.services.reminder_selector import ReminderSelector

logger = get_logger(__name__)


@dataclass
class ReminderRunResult:
    """Selection plus per-recipient delivery results."""

    selection: ReminderSelection
    deliveries: list[DeliveryResult] = field(default_factory=list)

    @property
    def sent(self) -> int:
        return sum(1 for d in self.deliveries if d.success)

    @property
    def failed(self) -> int:
        return sum(1 for d in self.deliveries if not d.success)


class SendTaskRemindersUseCase:
    """Use case for the reminder pass of a compliance cycle."""

    def __init__(
        self,
        task_store: IFilingTaskStore | None = None,
        directory: IDirectory | None = None,
        transport: INotificationTransport | None = None,
        renderer: DigestRenderer | None = None,
        settings: SchedulerSettings | None = None,
    ):
        self._task_store = task_store
        self._directory = directory
        self._transport = transport
        self._renderer = renderer
        self._settings = settings or get_settings().scheduler

    async def _get_task_store(self) -> IFilingTaskStore:
        if self._task_store is None:
            from entityhub.infrastructure.storage.sqlite import get_task_store
            self._task_store = await get_task_store()
        return self._task_store

    async def _get_directory(self) -> IDirectory:
        if self._directory is None:
            from entityhub.infrastructure.storage.sqlite import get_directory
            self._directory = await get_directory()
        return self._directory

    def _get_transport(self) -> INotificationTransport:
        if self._transport is None:
            from entityhub.infrastructure.notifications import get_notification_transport
            self._transport = get_notification_transport()
        return self._transport

    def _get_renderer(self) -> DigestRenderer:
        if self._renderer is None:
            settings = get_settings()
            self._renderer = DigestRenderer(
                portal_url=settings.notify.portal_url,
                product_name=settings.notify.sender_name,
            )
        return self._renderer

    async def preview(
        self,
        now: datetime | date,
        horizon_days: int | None = None,
    ) -> ReminderSelection:
        """Select reminder buckets without sending anything."""
        selector = ReminderSelector(
            await self._get_task_store(),
            await self._get_directory(),
            honor_filing_reminder_days=self._settings.honor_filing_reminder_days,
        )
        if horizon_days is None:
            horizon_days = self._settings.reminder_horizon_days
        return await selector.select(now, horizon_days)

    async def execute(
        self,
        now: datetime | date,
        horizon_days: int | None = None,
    ) -> ReminderRunResult:
        """
        Select and send reminder digests.

        Args:
            now: Point in time of the cycle.
            horizon_days: Days ahead to look (default from settings).

        Returns:
            ReminderRunResult with the selection and one delivery per
            recipient that had due tasks.
        """
        selection = await self.preview(now, horizon_days)
        result = ReminderRunResult(selection=selection)
        if not selection.buckets:
            return result

        dispatcher = NotificationDispatcher(self._get_transport(), self._get_renderer())
        result.deliveries = await dispatcher.dispatch_all(selection, now)

        logger.info(
            "reminders_sent",
            tasks_found=selection.tasks_found,
            recipients=len(result.deliveries),
            sent=result.sent,
            failed=result.failed,
        )
        return result
