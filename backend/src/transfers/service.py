"""Transfer service - grants time-limited access to all of an owner's documents.

Used when a citizen moves to another operator: the receiving operator gets
one pre-signed URL per document, all expiring at the same instant.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List

from domain.documents.document import Document
from domain.documents.errors import PersistenceError, UrlGenerationError
from domain.documents.ports.document_repository_port import DocumentRepositoryPort
from domain.documents.ports.object_storage_port import ObjectStoragePort
from observability.metrics import presigned_urls_issued_total

logger = logging.getLogger(__name__)

MAX_TRANSFER_DOCUMENTS = 1000
DEFAULT_TRANSFER_URL_TTL = timedelta(minutes=15)


@dataclass(frozen=True)
class TransferItem:
    document: Document
    presigned_url: str
    expires_at: datetime

    def to_dict(self) -> dict:
        return {
            "document_id": self.document.id,
            "filename": self.document.filename,
            "mime_type": self.document.mime_type,
            "size_bytes": self.document.size_bytes,
            "hash_sha256": self.document.hash_sha256,
            "url": self.presigned_url,
            "expires_at": self.expires_at.isoformat(),
        }


class TransferService:
    """Builds the transfer manifest for an owner.

    Args:
        repository: Document metadata store
        storage: Object storage issuing the URLs
        url_ttl: Validity of every URL in a batch
    """

    def __init__(
        self,
        repository: DocumentRepositoryPort,
        storage: ObjectStoragePort,
        url_ttl: timedelta = DEFAULT_TRANSFER_URL_TTL,
    ):
        self.repository = repository
        self.storage = storage
        self.url_ttl = url_ttl

    async def prepare_transfer(self, owner_id: int) -> List[TransferItem]:
        """Generate a pre-signed URL for each of the owner's documents.

        At most MAX_TRANSFER_DOCUMENTS documents are included. The batch is
        all-or-nothing: if any URL fails, no URLs are returned.

        Returns:
            List[TransferItem]: One item per document, all with the same expires_at

        Raises:
            PersistenceError: If the documents cannot be listed
            UrlGenerationError: If any URL cannot be generated
        """
        try:
            documents, _ = await self.repository.list(owner_id, MAX_TRANSFER_DOCUMENTS, 0)
        except Exception as e:
            raise PersistenceError("failed to list documents", cause=e) from e

        if not documents:
            return []

        expires_at = datetime.now(timezone.utc) + self.url_ttl

        items = []
        for document in documents:
            try:
                url = await self.storage.generate_presigned_url(document.object_key, self.url_ttl)
            except Exception as e:
                logger.error(
                    f"Transfer aborted, URL generation failed: owner_id={owner_id}, "
                    f"document_id={document.id}, error={e}"
                )
                raise UrlGenerationError(
                    f"failed to generate URL for document {document.id}", cause=e
                ) from e
            items.append(TransferItem(document=document, presigned_url=url, expires_at=expires_at))

        presigned_urls_issued_total.labels(purpose="transfer").inc(len(items))
        logger.info(f"Transfer prepared: owner_id={owner_id}, documents={len(items)}, expires_at={expires_at.isoformat()}")
        return items
