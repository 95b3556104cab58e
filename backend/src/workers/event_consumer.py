"""Broker event consumer entrypoint.

Subscribes the inbound event handlers to their queues and drains
deliveries until SIGINT/SIGTERM.

Run:
    python -m workers.event_consumer
"""

import logging
import signal

from config import Settings, get_settings
from database import SessionLocal, get_engine
from dependencies import ServiceContainer
from events.handlers import (
    AuthenticationCompletedHandler,
    DocumentDownloadHandler,
    UserTransferredHandler,
)
from infrastructure.messaging.broker_connection import BrokerConnection
from infrastructure.messaging.consumer import KombuMessageConsumer
from infrastructure.messaging.publisher import KombuMessagePublisher
from infrastructure.repositories.document_repository import SqlDocumentRepository
from infrastructure.repositories.processed_message_repository import SqlProcessedMessageRepository
from infrastructure.storage.s3_storage_adapter import S3StorageAdapter
from observability.logging_config import configure_logging

logger = logging.getLogger(__name__)


def subscribe_handlers(consumer: KombuMessageConsumer, services: ServiceContainer) -> None:
    """Register every inbound handler on its configured queue."""
    settings = services.settings

    consumer.subscribe(
        settings.AUTHENTICATION_RESULT_QUEUE,
        AuthenticationCompletedHandler(services.authentication, services.ledger),
    )
    consumer.subscribe(
        settings.USER_TRANSFER_QUEUE,
        UserTransferredHandler(services.deletions),
    )
    consumer.subscribe(
        settings.DOWNLOAD_REQUEST_QUEUE,
        DocumentDownloadHandler(services.uploads, services.publisher, settings.DOCUMENTS_READY_QUEUE),
    )


def run(settings: Settings) -> None:
    get_engine()

    broker = BrokerConnection.from_settings(settings)
    broker.connect()

    services = ServiceContainer.from_ports(
        settings=settings,
        repository=SqlDocumentRepository(SessionLocal),
        storage=S3StorageAdapter.from_settings(settings),
        publisher=KombuMessagePublisher(broker),
        processed_messages=SqlProcessedMessageRepository(SessionLocal),
        broker=broker,
        session_factory=SessionLocal,
    )
    consumer = KombuMessageConsumer(broker, prefetch_count=settings.RABBITMQ_PREFETCH_COUNT)
    subscribe_handlers(consumer, services)

    def _shutdown(signum, frame):
        logger.info(f"Received signal {signum}, stopping consumer")
        consumer.stop()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    try:
        consumer.run()
    finally:
        consumer.close()
        services.close()


def main() -> None:
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    run(settings)


if __name__ == "__main__":
    main()
