"""Authentication workflow service.

Sends documents to the external authentication service and applies its
results. The status moves to AUTHENTICATING and is persisted before the
request is published, so a document never sits in UNAUTHENTICATED while a
request for it is in flight.
"""

import logging
import uuid
from datetime import timedelta
from enum import Enum

from domain.documents.authentication_status import (
    AuthenticationStatus,
    can_transition,
    status_for_result,
    transition,
)
from domain.documents.document import Document
from domain.documents.errors import (
    NotFoundError,
    PersistenceError,
    PublishError,
    StatusUpdateError,
    UrlGenerationError,
)
from domain.documents.events import AuthenticationCompletedEvent, AuthenticationRequestedEvent
from domain.documents.ports.document_repository_port import DocumentRepositoryPort
from domain.documents.ports.messaging_port import MessagePublisherPort
from domain.documents.ports.object_storage_port import ObjectStoragePort
from observability.metrics import (
    authentication_completions_total,
    authentication_requests_total,
    presigned_urls_issued_total,
)

logger = logging.getLogger(__name__)

DEFAULT_AUTHENTICATION_URL_TTL = timedelta(hours=24)


class CompletionResult(str, Enum):
    """What handle_authentication_completed did with a result event."""
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    SKIPPED = "skipped"  # Unknown document or not awaiting a result


class AuthenticationService:
    """Drives the UNAUTHENTICATED -> AUTHENTICATING -> AUTHENTICATED workflow.

    Args:
        repository: Document metadata store
        storage: Object storage used to grant the external service read access
        publisher: Broker publisher for authentication requests
        request_queue: Queue the external service consumes requests from
        url_ttl: Validity of the document URL sent with the request
    """

    def __init__(
        self,
        repository: DocumentRepositoryPort,
        storage: ObjectStoragePort,
        publisher: MessagePublisherPort,
        request_queue: str,
        url_ttl: timedelta = DEFAULT_AUTHENTICATION_URL_TTL,
    ):
        self.repository = repository
        self.storage = storage
        self.publisher = publisher
        self.request_queue = request_queue
        self.url_ttl = url_ttl

    async def request_authentication(self, document_id: str) -> Document:
        """Send a document to the external authentication service.

        Re-requesting a document that is already AUTHENTICATING re-sends the
        request. No step is retried here; if a later step fails the document
        stays AUTHENTICATING and the caller may request again.

        Args:
            document_id: Document to authenticate

        Returns:
            Document: The document in AUTHENTICATING state

        Raises:
            NotFoundError: If the document does not exist
            PersistenceError: If the document cannot be read
            ValidationError: If the document is already AUTHENTICATED
            StatusUpdateError: If the status cannot be persisted
            UrlGenerationError: If the pre-signed URL cannot be generated
            PublishError: If the request cannot be published
        """
        try:
            document = await self.repository.get_by_id(document_id)
        except Exception as e:
            raise PersistenceError("failed to load document", cause=e) from e
        if document is None:
            raise NotFoundError(f"document {document_id} not found")

        new_status = transition(document.status, AuthenticationStatus.AUTHENTICATING)

        try:
            updated = await self.repository.update_authentication_status(document_id, new_status)
        except Exception as e:
            authentication_requests_total.labels(status="error").inc()
            raise StatusUpdateError(cause=e) from e
        if not updated:
            raise NotFoundError(f"document {document_id} not found")

        try:
            url = await self.storage.generate_presigned_url(document.object_key, self.url_ttl)
        except Exception as e:
            authentication_requests_total.labels(status="error").inc()
            logger.error(f"Failed to generate authentication URL: document_id={document_id}, error={e}")
            raise UrlGenerationError(cause=e) from e
        presigned_urls_issued_total.labels(purpose="authentication").inc()

        event = AuthenticationRequestedEvent(
            owner_id=document.owner_id,
            url_document=url,
            document_title=document.filename,
            document_id=document_id,
            message_id=str(uuid.uuid4()),
        )
        try:
            await self.publisher.publish(self.request_queue, event.to_bytes())
        except Exception as e:
            authentication_requests_total.labels(status="error").inc()
            logger.error(f"Failed to publish authentication request: document_id={document_id}, error={e}")
            raise PublishError(cause=e) from e

        authentication_requests_total.labels(status="success").inc()
        logger.info(
            f"Authentication requested: document_id={document_id}, owner_id={document.owner_id}, "
            f"message_id={event.message_id}"
        )
        return document.with_status(new_status)

    async def handle_authentication_completed(self, event: AuthenticationCompletedEvent) -> CompletionResult:
        """Apply an authentication result to its document.

        Results for unknown documents, or for documents that are not waiting
        for a result, are logged and skipped; redelivering them changes nothing.

        Raises:
            PersistenceError: If the document cannot be read
            StatusUpdateError: If the new status cannot be persisted
        """
        try:
            document = await self.repository.get_by_id(event.document_id)
        except Exception as e:
            raise PersistenceError("failed to load document", cause=e) from e

        if document is None:
            authentication_completions_total.labels(result=CompletionResult.SKIPPED.value).inc()
            logger.warning(f"Authentication result for unknown document: document_id={event.document_id}")
            return CompletionResult.SKIPPED

        target = status_for_result(event.authenticated)
        if not can_transition(document.status, target):
            authentication_completions_total.labels(result=CompletionResult.SKIPPED.value).inc()
            logger.warning(
                f"Ignoring authentication result: document_id={event.document_id}, "
                f"status={document.status}, result={target}"
            )
            return CompletionResult.SKIPPED

        try:
            await self.repository.update_authentication_status(event.document_id, target)
        except Exception as e:
            raise StatusUpdateError(cause=e) from e

        result = CompletionResult.AUTHENTICATED if event.authenticated else CompletionResult.REJECTED
        authentication_completions_total.labels(result=result.value).inc()
        logger.info(
            f"Authentication completed: document_id={event.document_id}, result={result.value}, "
            f"message={event.message!r}"
        )
        return result
