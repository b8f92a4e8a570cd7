"""
Notification Dispatcher.

Sends one digest per recipient. A failure for one recipient is recorded
and never stops delivery to the others.
"""

from datetime import date, datetime

from entityhub.config import get_logger
from entityhub.core.entities.directory import Recipient
from entityhub.core.entities.reminder import (
    DeliveryResult,
    ReminderItem,
    ReminderSelection,
)
from entityhub.core.interfaces.notification import INotificationTransport
from entityhub.core.services.digest_renderer import DigestRenderer

logger = get_logger(__name__)


class NotificationDispatcher:
    """Render and send reminder digests through a transport."""

    def __init__(
        self,
        transport: INotificationTransport,
        renderer: DigestRenderer | None = None,
    ) -> None:
        self._transport = transport
        self._renderer = renderer or DigestRenderer()

    async def dispatch(
        self,
        recipient: Recipient,
        items: list[ReminderItem],
        now: date | datetime,
        horizon_days: int,
    ) -> DeliveryResult:
        """
        Send one digest to one recipient.

        Any rendering or transport exception is converted into a failed
        DeliveryResult.
        """
        provider = getattr(self._transport, "name", type(self._transport).__name__)
        try:
            message = self._renderer.render(recipient, items, now, horizon_days)
            result = await self._transport.send(message)
        except Exception as e:
            # Any failure stays with this recipient
            logger.warning(
                "digest_send_failed",
                recipient_id=recipient.id,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return DeliveryResult(
                recipient_id=recipient.id,
                email=recipient.email,
                success=False,
                task_count=len(items),
                provider=provider,
                error=str(e),
            )

        if result.success:
            logger.info(
                "digest_sent",
                recipient_id=recipient.id,
                task_count=len(items),
                provider=result.provider,
            )
        else:
            logger.warning(
                "digest_rejected",
                recipient_id=recipient.id,
                error=result.error,
                provider=result.provider,
            )
        return result

    async def dispatch_all(
        self,
        selection: ReminderSelection,
        now: date | datetime,
    ) -> list[DeliveryResult]:
        """Send a digest for every non-empty bucket of a selection."""
        results: list[DeliveryResult] = []
        for recipient_id, items in selection.buckets.items():
            if not items:
                continue
            recipient = selection.recipient(recipient_id)
            if recipient is None:
                continue
            results.append(
                await self.dispatch(recipient, items, now, selection.horizon_days)
            )
        return results
