"""Notification transport implementations."""

from entityhub.config import get_settings
from entityhub.core.interfaces.notification import INotificationTransport
from entityhub.infrastructure.notifications.brevo import BrevoEmailTransport
from entityhub.infrastructure.notifications.log_transport import LogTransport

_transport: INotificationTransport | None = None


def create_transport(provider: str | None = None) -> INotificationTransport:
    """Build the transport named by provider (default from settings)."""
    settings = get_settings()
    provider = provider or settings.notify.provider
    if provider == "brevo":
        return BrevoEmailTransport(settings.notify)
    return LogTransport()


def get_notification_transport() -> INotificationTransport:
    """Get singleton notification transport."""
    global _transport
    if _transport is None:
        _transport = create_transport()
    return _transport


async def close_notification_transport() -> None:
    global _transport
    if _transport is not None:
        await _transport.close()
        _transport = None


__all__ = [
    "BrevoEmailTransport",
    "LogTransport",
    "create_transport",
    "get_notification_transport",
    "close_notification_transport",
]
