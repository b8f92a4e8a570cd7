"""
Logging notification transport.

Records digests in memory and logs them instead of sending email. Used
for development and as the default provider.
"""

from uuid import uuid4

from entityhub.config import get_logger
from entityhub.core.entities.reminder import DeliveryResult, DigestMessage
from entityhub.core.interfaces.notification import INotificationTransport

logger = get_logger(__name__)


class LogTransport(INotificationTransport):
    """Transport that only logs."""

    name = "log"

    def __init__(self) -> None:
        self.sent: list[DigestMessage] = []

    async def send(self, message: DigestMessage) -> DeliveryResult:
        self.sent.append(message)
        message_id = f"log-{uuid4().hex[:12]}"
        logger.info(
            "digest_logged",
            recipient_id=message.recipient_id,
            to=message.to_email,
            subject=message.subject,
            task_ids=message.task_ids,
            message_id=message_id,
        )
        return DeliveryResult(
            recipient_id=message.recipient_id,
            email=message.to_email,
            success=True,
            task_count=len(message.task_ids),
            provider=self.name,
            message_id=message_id,
        )
