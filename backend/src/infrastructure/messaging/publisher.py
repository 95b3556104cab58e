"""Kombu publisher - Implementation of MessagePublisherPort."""

import asyncio
import logging
import threading
import uuid

from kombu import Producer

from domain.documents.ports.messaging_port import MessagePublisherPort
from observability.metrics import messages_published_total
from .broker_connection import BrokerConnection, MessagingError

logger = logging.getLogger(__name__)


class KombuMessagePublisher(MessagePublisherPort):
    """Publishes JSON payloads to queues on the default exchange.

    Owns one channel for its lifetime; publishes are serialized because kombu
    channels must not be used from several threads at once.
    """

    def __init__(self, broker: BrokerConnection):
        self._broker = broker
        self._channel = broker.create_channel()
        self._producer = Producer(self._channel)
        self._lock = threading.Lock()
        self._closed = False

    def _publish_sync(self, queue: str, payload: bytes) -> str:
        message_id = str(uuid.uuid4())
        with self._lock:
            if self._closed:
                raise MessagingError("publisher is closed")
            self._producer.publish(
                payload,
                routing_key=queue,
                declare=[self._broker.queue(queue)],
                content_type="application/json",
                content_encoding="utf-8",
                delivery_mode=2 if self._broker.durable else 1,
                message_id=message_id,
            )
        return message_id

    async def publish(self, queue: str, payload: bytes) -> None:
        """Publish a payload to a queue.

        Raises:
            MessagingError: If the broker rejects or cannot receive the message
        """
        loop = asyncio.get_running_loop()
        try:
            message_id = await loop.run_in_executor(None, self._publish_sync, queue, payload)
        except MessagingError:
            messages_published_total.labels(queue=queue, status="error").inc()
            raise
        except Exception as e:
            messages_published_total.labels(queue=queue, status="error").inc()
            logger.error(f"Publish failed: queue={queue}, error={e}")
            raise MessagingError(f"Failed to publish to {queue}: {e}") from e

        messages_published_total.labels(queue=queue, status="success").inc()
        logger.info(f"Published message: queue={queue}, message_id={message_id}")

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._channel.close()
