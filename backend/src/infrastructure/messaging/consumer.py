"""Kombu consumer - Implementation of MessageConsumerPort.

Delivery outcome is decided from the handler result:
    handler returned          -> ack
    handler raised ValidationError -> reject, no requeue (never retried)
    handler raised anything else   -> requeue for redelivery
"""

import asyncio
import functools
import logging
import socket
import threading
from typing import List, Optional

from kombu import Consumer

from domain.documents.errors import ValidationError
from domain.documents.ports.messaging_port import MessageConsumerPort, MessageHandler
from observability.metrics import messages_consumed_total
from observability.request_id import generate_request_id, reset_request_id, set_request_id
from .broker_connection import BrokerConnection, message_id_of

logger = logging.getLogger(__name__)

OUTCOME_ACK = "ack"
OUTCOME_REJECT = "reject"
OUTCOME_REQUEUE = "requeue"


def outcome_for_error(error: Optional[BaseException]) -> str:
    """Map a handler result to a broker acknowledgement.

    Example:
        >>> outcome_for_error(None)
        'ack'
        >>> outcome_for_error(ValidationError("bad payload"))
        'reject'
        >>> outcome_for_error(RuntimeError("db down"))
        'requeue'
    """
    if error is None:
        return OUTCOME_ACK
    if isinstance(error, ValidationError):
        return OUTCOME_REJECT
    return OUTCOME_REQUEUE


class KombuMessageConsumer(MessageConsumerPort):
    """Dispatches deliveries from subscribed queues to async handlers.

    kombu drains synchronously, so the consumer owns an event loop and runs
    each handler to completion on it before acknowledging the delivery.
    """

    def __init__(self, broker: BrokerConnection, prefetch_count: int = 10):
        self._broker = broker
        self._channel = broker.create_channel()
        self._prefetch_count = prefetch_count
        self._consumers: List[Consumer] = []
        self._loop = asyncio.new_event_loop()
        self._stop = threading.Event()

    @property
    def queues(self) -> List[str]:
        return [q.name for c in self._consumers for q in c.queues]

    def subscribe(self, queue: str, handler: MessageHandler) -> None:
        consumer = Consumer(
            self._channel,
            queues=[self._broker.queue(queue)],
            on_message=functools.partial(self._on_message, queue, handler),
        )
        consumer.qos(prefetch_count=self._prefetch_count)
        consumer.consume()
        self._consumers.append(consumer)
        logger.info(f"Subscribed to queue: queue={queue}")

    async def handle_delivery(
        self,
        queue: str,
        handler: MessageHandler,
        body: bytes,
        message_id: Optional[str],
    ) -> str:
        """Run a handler for one delivery and return the acknowledgement outcome."""
        token = set_request_id(message_id or generate_request_id())
        error: Optional[BaseException] = None
        try:
            await handler(body, message_id)
        except Exception as e:
            error = e
        finally:
            reset_request_id(token)

        outcome = outcome_for_error(error)
        messages_consumed_total.labels(queue=queue, outcome=outcome).inc()

        if outcome == OUTCOME_REJECT:
            logger.warning(f"Rejected message: queue={queue}, message_id={message_id}, error={error}")
        elif outcome == OUTCOME_REQUEUE:
            logger.error(
                f"Handler failed, requeueing: queue={queue}, message_id={message_id}, error={error}",
                exc_info=error,
            )
        return outcome

    def _on_message(self, queue: str, handler: MessageHandler, message) -> None:
        body = message.body
        if isinstance(body, str):
            body = body.encode("utf-8")

        outcome = self._loop.run_until_complete(
            self.handle_delivery(queue, handler, body, message_id_of(message))
        )

        if outcome == OUTCOME_ACK:
            message.ack()
        elif outcome == OUTCOME_REJECT:
            message.reject(requeue=False)
        else:
            message.requeue()

    def drain_events(self, timeout: float = 1.0) -> bool:
        """Process deliveries available within timeout.

        Returns:
            bool: False if nothing arrived before the timeout
        """
        try:
            self._broker.connection.drain_events(timeout=timeout)
        except socket.timeout:
            return False
        return True

    def run(self, poll_interval: float = 1.0) -> None:
        """Drain events until stop() is called."""
        logger.info(f"Consumer started: queues={self.queues}")
        while not self._stop.is_set():
            self.drain_events(timeout=poll_interval)
        logger.info("Consumer stopped")

    def stop(self) -> None:
        self._stop.set()

    def close(self) -> None:
        self.stop()
        for consumer in self._consumers:
            consumer.cancel()
        self._consumers.clear()
        self._channel.close()
        self._loop.close()
