"""Core interfaces (ports) for dependency injection."""

from entityhub.core.interfaces.notification import INotificationTransport
from entityhub.core.interfaces.storage import (
    IDirectory,
    IFilingStore,
    IFilingTaskStore,
    IFilingTypeStore,
)

__all__ = [
    # Storage interfaces
    "IFilingTypeStore",
    "IFilingStore",
    "IFilingTaskStore",
    "IDirectory",
    # Notification interfaces
    "INotificationTransport",
]
