"""Document query service - single reads and paginated listings."""

import logging
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import List, Optional

from domain.documents.document import Document
from domain.documents.errors import NotFoundError, PersistenceError, UrlGenerationError
from domain.documents.pagination import normalize_pagination, total_pages
from domain.documents.ports.document_repository_port import DocumentRepositoryPort
from domain.documents.ports.object_storage_port import ObjectStoragePort
from observability.metrics import presigned_urls_issued_total

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_URL_TTL = timedelta(minutes=15)


@dataclass
class DocumentPage:
    items: List[Document]
    page: int
    limit: int
    total: int
    total_pages: int


class DocumentQueryService:
    """Reads documents; single reads carry a fresh pre-signed URL."""

    def __init__(
        self,
        repository: DocumentRepositoryPort,
        storage: Optional[ObjectStoragePort] = None,
        url_ttl: timedelta = DEFAULT_DOCUMENT_URL_TTL,
    ):
        self.repository = repository
        self.storage = storage
        self.url_ttl = url_ttl

    async def get(self, document_id: str, owner_id: Optional[int] = None) -> Document:
        """Get a document by id.

        When storage is configured the returned document's url is replaced
        with a pre-signed URL valid for url_ttl.

        Args:
            document_id: Document to read
            owner_id: When given, documents of other owners are reported as not found

        Raises:
            NotFoundError: If the document does not exist
            PersistenceError: If the store cannot be read
            UrlGenerationError: If the URL cannot be generated
        """
        document = await self.get_owned(document_id, owner_id)

        if self.storage is None:
            return document

        try:
            url = await self.storage.generate_presigned_url(document.object_key, self.url_ttl)
        except Exception as e:
            raise UrlGenerationError(cause=e) from e
        presigned_urls_issued_total.labels(purpose="read").inc()
        return replace(document, url=url)

    async def get_owned(self, document_id: str, owner_id: Optional[int] = None) -> Document:
        """Load a document without issuing a URL, checking ownership when owner_id is given."""
        try:
            document = await self.repository.get_by_id(document_id)
        except Exception as e:
            raise PersistenceError("failed to load document", cause=e) from e

        if document is None or (owner_id is not None and document.owner_id != owner_id):
            raise NotFoundError(f"document {document_id} not found")
        return document

    async def list(self, owner_id: int, page: int = 1, limit: int = 10) -> DocumentPage:
        """List one page of an owner's documents, newest first.

        Out-of-range page/limit values are normalized rather than rejected.

        Raises:
            PersistenceError: If the store cannot be read
        """
        params = normalize_pagination(page, limit)
        try:
            items, total = await self.repository.list(owner_id, params.limit, params.offset)
        except Exception as e:
            raise PersistenceError("failed to list documents", cause=e) from e

        logger.debug(f"Listed documents: owner_id={owner_id}, page={params.page}, returned={len(items)}, total={total}")
        return DocumentPage(
            items=items,
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=total_pages(total, params.limit),
        )
