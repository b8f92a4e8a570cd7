"""
Abstract interface for outbound notification transports.
"""

from abc import ABC, abstractmethod

from entityhub.core.entities.reminder import DeliveryResult, DigestMessage


class INotificationTransport(ABC):
    """
    Sends rendered digests to a contact address.

    Delivery is at-least-once best effort. A rejected send is reported as
    an unsuccessful DeliveryResult rather than raised.
    """

    name: str = "transport"

    @abstractmethod
    async def send(self, message: DigestMessage) -> DeliveryResult:
        """Send one digest."""
        pass

    async def close(self) -> None:
        """Release transport resources."""
        return None
