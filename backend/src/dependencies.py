"""Service wiring and FastAPI dependencies.

The container holds one adapter per port and the services built on them.
main.py builds it at startup and stores it on app.state; tests install a
container built from in-memory doubles instead.

Usage:
    @router.get("/documents")
    async def list_documents(services: ServiceContainer = Depends(get_container)):
        ...
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import HTTPException, Request, status
from sqlalchemy.orm import Session

from authentication.service import AuthenticationService
from config import Settings, validate_storage_settings
from documents.service import DocumentQueryService
from domain.documents.ports.document_repository_port import DocumentRepositoryPort
from domain.documents.ports.messaging_port import MessagePublisherPort
from domain.documents.ports.object_storage_port import ObjectStoragePort
from domain.documents.ports.processed_message_repository_port import ProcessedMessageRepositoryPort
from events.idempotency import ProcessedMessageLedger
from retention.service import DeletionService
from transfers.service import TransferService
from uploads.service import UploadService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    repository: DocumentRepositoryPort
    storage: ObjectStoragePort
    publisher: MessagePublisherPort
    processed_messages: ProcessedMessageRepositoryPort
    uploads: UploadService
    queries: DocumentQueryService
    authentication: AuthenticationService
    transfers: TransferService
    deletions: DeletionService
    ledger: ProcessedMessageLedger
    broker: Optional[object] = None  # BrokerConnection when built from settings
    session_factory: Optional[Callable[[], Session]] = None

    @classmethod
    def from_ports(
        cls,
        settings: Settings,
        repository: DocumentRepositoryPort,
        storage: ObjectStoragePort,
        publisher: MessagePublisherPort,
        processed_messages: ProcessedMessageRepositoryPort,
        broker: Optional[object] = None,
        session_factory: Optional[Callable[[], Session]] = None,
    ) -> "ServiceContainer":
        """Build every service on top of the given port adapters."""
        return cls(
            settings=settings,
            repository=repository,
            storage=storage,
            publisher=publisher,
            processed_messages=processed_messages,
            uploads=UploadService(repository, storage),
            queries=DocumentQueryService(repository, storage, url_ttl=settings.document_url_ttl),
            authentication=AuthenticationService(
                repository,
                storage,
                publisher,
                request_queue=settings.AUTHENTICATION_REQUEST_QUEUE,
                url_ttl=settings.authentication_url_ttl,
            ),
            transfers=TransferService(repository, storage, url_ttl=settings.transfer_url_ttl),
            deletions=DeletionService(repository, storage),
            ledger=ProcessedMessageLedger(processed_messages, ttl=settings.processed_message_ttl),
            broker=broker,
            session_factory=session_factory,
        )

    def close(self) -> None:
        self.publisher.close()
        if self.broker is not None:
            self.broker.close()


def build_container(settings: Settings) -> ServiceContainer:
    """Build the production container: PostgreSQL, S3 and RabbitMQ adapters.

    Raises:
        ValueError: If the storage settings are invalid
        MessagingError: If the broker cannot be reached
    """
    from database import SessionLocal, get_engine, init_db
    from infrastructure.messaging.broker_connection import BrokerConnection
    from infrastructure.messaging.publisher import KombuMessagePublisher
    from infrastructure.repositories.document_repository import SqlDocumentRepository
    from infrastructure.repositories.processed_message_repository import SqlProcessedMessageRepository
    from infrastructure.storage.s3_storage_adapter import S3StorageAdapter

    validate_storage_settings(settings)
    get_engine()
    if settings.ENVIRONMENT == "development":
        init_db()

    broker = BrokerConnection.from_settings(settings)
    broker.connect()

    container = ServiceContainer.from_ports(
        settings=settings,
        repository=SqlDocumentRepository(SessionLocal),
        storage=S3StorageAdapter.from_settings(settings),
        publisher=KombuMessagePublisher(broker),
        processed_messages=SqlProcessedMessageRepository(SessionLocal),
        broker=broker,
        session_factory=SessionLocal,
    )
    logger.info("Service container built")
    return container


def get_container(request: Request) -> ServiceContainer:
    """FastAPI dependency returning the application's service container."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not ready",
        )
    return container
