"""Retention service for document deletion.

Deletion is record-first: the metadata row is removed, then the blob is
deleted best-effort. A blob still referenced by another record (the same
content uploaded by another owner) is kept. A blob that cannot be deleted
is logged and counted (documents_blob_delete_failures_total) but never
fails the operation; a retry would not find the record any more.
"""

import logging
from typing import Iterable

from domain.documents.document import Document
from domain.documents.errors import NotFoundError, PersistenceError
from domain.documents.ports.document_repository_port import DocumentRepositoryPort
from domain.documents.ports.object_storage_port import ObjectStoragePort
from observability.metrics import blob_delete_failures_total, documents_deleted_total

logger = logging.getLogger(__name__)

# Upper bound of documents handled by one bulk deletion
DELETION_BATCH_SIZE = 1000


class DeletionService:
    """Deletes documents and their blobs.

    Args:
        repository: Document metadata store
        storage: Object storage holding the blobs
    """

    def __init__(self, repository: DocumentRepositoryPort, storage: ObjectStoragePort):
        self.repository = repository
        self.storage = storage

    async def delete(self, document_id: str) -> Document:
        """Delete one document.

        Returns:
            Document: The deleted document

        Raises:
            NotFoundError: If the document does not exist (no blob is touched)
            PersistenceError: If the record cannot be deleted
        """
        try:
            deleted = await self.repository.delete_by_id(document_id)
        except Exception as e:
            raise PersistenceError("failed to delete document", cause=e) from e

        if deleted is None:
            raise NotFoundError(f"document {document_id} not found")

        documents_deleted_total.labels(mode="single").inc()
        await self._delete_blobs([deleted])

        logger.info(f"Document deleted: document_id={document_id}, owner_id={deleted.owner_id}")
        return deleted

    async def delete_all(self, owner_id: int) -> int:
        """Delete every document of an owner.

        Returns:
            int: Number of deleted records (0 when the owner has none)

        Raises:
            PersistenceError: If listing or deleting the records fails
        """
        try:
            documents, _ = await self.repository.list(owner_id, DELETION_BATCH_SIZE, 0)
        except Exception as e:
            raise PersistenceError("failed to list documents", cause=e) from e

        if not documents:
            logger.info(f"No documents to delete: owner_id={owner_id}")
            return 0

        try:
            deleted_count = await self.repository.delete_all_by_owner(owner_id)
        except Exception as e:
            raise PersistenceError("failed to delete documents", cause=e) from e

        documents_deleted_total.labels(mode="owner").inc(deleted_count)
        failures = await self._delete_blobs(documents)

        logger.info(
            f"Owner documents deleted: owner_id={owner_id}, deleted={deleted_count}, "
            f"blob_failures={failures}"
        )
        return deleted_count

    async def _delete_blobs(self, documents: Iterable[Document]) -> int:
        failures = 0
        for document in documents:
            try:
                # Keys carry no owner: the same bytes of another owner share the blob
                references = await self.repository.count_by_object_key(document.object_key)
            except Exception as e:
                failures += 1
                blob_delete_failures_total.inc()
                logger.error(
                    f"Blob reference check failed, object left in place: document_id={document.id}, "
                    f"object_key={document.object_key}, error={e}"
                )
                continue

            if references > 0:
                logger.info(
                    f"Blob still referenced, keeping object: document_id={document.id}, "
                    f"object_key={document.object_key}, references={references}"
                )
                continue

            try:
                await self.storage.delete(document.object_key)
            except Exception as e:
                failures += 1
                blob_delete_failures_total.inc()
                logger.error(
                    f"Blob delete failed, object left orphaned: document_id={document.id}, "
                    f"object_key={document.object_key}, error={e}"
                )
        return failures
