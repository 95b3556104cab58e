"""Messaging Ports - Domain interfaces for the message broker.

Delivery is at-least-once: handlers must tolerate redelivery
(see events.idempotency).
Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional


# Handler receives the raw payload and the broker message id (if any).
# Returning normally acknowledges the message; raising negatively acknowledges it.
MessageHandler = Callable[[bytes, Optional[str]], Awaitable[None]]


class MessagePublisherPort(ABC):
    """Publishes byte payloads to named queues."""

    @abstractmethod
    async def publish(self, queue: str, payload: bytes) -> None:
        """Publish a payload to a queue.

        Raises:
            MessagingError: If the message could not be handed to the broker
        """

    @abstractmethod
    def close(self) -> None:
        """Release the publisher's channel (the connection is shared)."""


class MessageConsumerPort(ABC):
    """Delivers queue payloads to handler coroutines."""

    @abstractmethod
    def subscribe(self, queue: str, handler: MessageHandler) -> None:
        """Register a handler for a queue."""

    @abstractmethod
    def close(self) -> None:
        """Release the consumer's channel (the connection is shared)."""
