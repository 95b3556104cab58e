"""Broker message handlers.

Each handler is an async callable taking (body, delivery_message_id) so it
can be passed straight to MessageConsumerPort.subscribe(). Malformed bodies
raise EventPayloadError and are rejected without requeue; other failures
propagate so the delivery is requeued.
"""

import logging
import posixpath
from typing import List, Optional
from urllib.parse import unquote, urlparse

import httpx

from authentication.service import AuthenticationService
from domain.documents.errors import DomainError
from domain.documents.events import (
    AuthenticationCompletedEvent,
    DocumentDownloadRequestedEvent,
    DocumentsReadyEvent,
    UserTransferredEvent,
)
from domain.documents.ports.messaging_port import MessagePublisherPort
from observability.metrics import authentication_completions_total
from retention.service import DeletionService
from uploads.service import UploadService
from .idempotency import ProcessedMessageLedger

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_FILENAME = "downloaded-file"
DEFAULT_DOWNLOAD_TIMEOUT = 30.0


class AuthenticationCompletedHandler:
    """Applies authentication results, at most once per message id.

    The ledger key is the payload messageId, or the broker message id when
    the payload has none. Without either the result is applied unguarded;
    applying the same result twice is harmless because the second attempt
    finds the document no longer AUTHENTICATING.
    """

    PROCESSED_BY = "authentication-handler"

    def __init__(self, service: AuthenticationService, ledger: ProcessedMessageLedger):
        self.service = service
        self.ledger = ledger

    async def __call__(self, body: bytes, delivery_message_id: Optional[str] = None) -> None:
        event = AuthenticationCompletedEvent.from_bytes(body)
        message_id = event.message_id or delivery_message_id
        if not message_id:
            logger.warning(f"Authentication result without message id: document_id={event.document_id}")

        async def _apply() -> None:
            await self.service.handle_authentication_completed(event)

        applied = await self.ledger.run_once(message_id, event.document_id, self.PROCESSED_BY, _apply)
        if not applied:
            authentication_completions_total.labels(result="duplicate").inc()


class UserTransferredHandler:
    """Deletes every document of a citizen who moved to another operator."""

    def __init__(self, deletion_service: DeletionService):
        self.deletion_service = deletion_service

    async def __call__(self, body: bytes, delivery_message_id: Optional[str] = None) -> None:
        event = UserTransferredEvent.from_bytes(body)
        deleted = await self.deletion_service.delete_all(event.owner_id)
        logger.info(f"User transferred, documents removed: owner_id={event.owner_id}, deleted={deleted}")


def filename_from_url(url: str) -> str:
    """Last path segment of a URL, ignoring the query string.

    Example:
        >>> filename_from_url("https://s3.example.com/bucket/ab/abc.pdf?X-Amz-Signature=1")
        'abc.pdf'
        >>> filename_from_url("https://example.com/")
        'downloaded-file'
    """
    try:
        path = urlparse(url).path
    except ValueError:
        return DEFAULT_DOWNLOAD_FILENAME
    name = posixpath.basename(unquote(path))
    return name or DEFAULT_DOWNLOAD_FILENAME


class DocumentDownloadHandler:
    """Imports documents from pre-signed URLs sent by another operator.

    Every URL is attempted; a failed or malformed URL does not stop the others. One
    DocumentsReadyEvent is published per batch: "success" when every URL
    was stored, otherwise "failure" with the last error message.
    """

    def __init__(
        self,
        upload_service: UploadService,
        publisher: MessagePublisherPort,
        ready_queue: str,
        timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.upload_service = upload_service
        self.publisher = publisher
        self.ready_queue = ready_queue
        self.timeout = timeout
        self.transport = transport

    async def __call__(self, body: bytes, delivery_message_id: Optional[str] = None) -> None:
        event = DocumentDownloadRequestedEvent.from_bytes(body)
        errors: List[str] = []

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            for url in event.urls:
                try:
                    response = await client.get(url)
                    response.raise_for_status()
                    await self.upload_service.upload_bytes(
                        response.content, filename_from_url(url), event.owner_id
                    )
                except (httpx.HTTPError, httpx.InvalidURL, DomainError) as e:
                    logger.error(f"Document download failed: owner_id={event.owner_id}, file={filename_from_url(url)}, error={e}")
                    errors.append(str(e))

        ready = DocumentsReadyEvent(
            owner_id=event.owner_id,
            status="failure" if errors else "success",
            message=errors[-1] if errors else None,
        )
        await self.publisher.publish(self.ready_queue, ready.to_bytes())
        logger.info(
            f"Download batch finished: owner_id={event.owner_id}, urls={len(event.urls)}, "
            f"failed={len(errors)}"
        )
