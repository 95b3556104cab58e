"""Upload service - stores a file once per (content hash, owner).

Flow:
1. Hash the full content (SHA256) and measure its size
2. Return the owner's existing document when the hash is already known
   (also when a concurrent upload of the same bytes creates it first)
3. Otherwise write the blob under its hash-derived key and create the record

The same bytes uploaded by two owners produce two documents.
"""

import io
import logging
from typing import BinaryIO, Optional

from domain.documents.authentication_status import AuthenticationStatus
from domain.documents.content_addressing import calculate_sha256, object_key_from_hash
from domain.documents.document import Document
from domain.documents.errors import (
    DuplicateDocumentError,
    FileReadError,
    PersistenceError,
    StorageUploadError,
    ValidationError,
)
from domain.documents.mime_types import ExtensionMimeTypeDetector
from domain.documents.ports.document_repository_port import DocumentRepositoryPort
from domain.documents.ports.object_storage_port import ObjectStoragePort
from observability.metrics import uploads_total

logger = logging.getLogger(__name__)


class UploadService:
    """Uploads documents to object storage and records their metadata.

    Example:
        service = UploadService(repository, storage)
        with open("invoice.pdf", "rb") as f:
            document = await service.upload(f, "invoice.pdf", owner_id=42)
    """

    def __init__(
        self,
        repository: DocumentRepositoryPort,
        storage: ObjectStoragePort,
        mime_detector: Optional[ExtensionMimeTypeDetector] = None,
    ):
        self.repository = repository
        self.storage = storage
        self.mime_detector = mime_detector or ExtensionMimeTypeDetector()

    async def upload(self, file: BinaryIO, filename: str, owner_id: int) -> Document:
        """Store a file for an owner, deduplicating by content hash.

        Args:
            file: Seekable binary stream with the file content
            filename: Original filename (drives MIME type and key extension)
            owner_id: Owner of the document

        Returns:
            Document: The newly created document, or the owner's existing
                document with the same content

        Raises:
            FileReadError: If the stream cannot be read or rewound
            HashCalculationError: If hashing fails mid-stream
            StorageUploadError: If the blob write fails (no record is created)
            ValidationError: If the resulting document breaks an invariant
            PersistenceError: If the record cannot be saved
        """
        if file is None:
            raise FileReadError("no file provided")

        self._rewind(file)
        hash_sha256 = calculate_sha256(file)
        try:
            size_bytes = file.tell()
        except (OSError, ValueError) as e:
            raise FileReadError(cause=e) from e

        existing = await self._find_existing(hash_sha256, owner_id)
        if existing is not None:
            uploads_total.labels(status="deduplicated").inc()
            logger.info(
                f"Duplicate upload, returning existing document: document_id={existing.id}, "
                f"owner_id={owner_id}, sha256={hash_sha256}"
            )
            return existing

        mime_type = self.mime_detector.detect(filename)
        object_key = object_key_from_hash(hash_sha256, filename)

        self._rewind(file)
        try:
            await self.storage.put(file, object_key, mime_type)
        except Exception as e:
            uploads_total.labels(status="error").inc()
            logger.error(f"Blob upload failed: object_key={object_key}, owner_id={owner_id}, error={e}")
            raise StorageUploadError(cause=e) from e

        document = Document(
            filename=filename,
            mime_type=mime_type,
            size_bytes=size_bytes,
            hash_sha256=hash_sha256,
            bucket=self.storage.bucket_name,
            object_key=object_key,
            owner_id=owner_id,
            authentication_status=AuthenticationStatus.UNAUTHENTICATED,
            url=self.storage.public_url(object_key),
        )
        try:
            document.validate()
        except ValidationError:
            # The blob stays in storage; a later upload of the same bytes reuses the key
            uploads_total.labels(status="error").inc()
            raise

        try:
            created = await self.repository.create(document)
        except DuplicateDocumentError:
            # A concurrent upload of the same bytes won the unique index
            winner = await self._find_existing(hash_sha256, owner_id)
            if winner is None:
                uploads_total.labels(status="error").inc()
                raise
            uploads_total.labels(status="deduplicated").inc()
            logger.info(
                f"Concurrent duplicate upload, returning existing document: document_id={winner.id}, "
                f"owner_id={owner_id}, sha256={hash_sha256}"
            )
            return winner
        except Exception as e:
            uploads_total.labels(status="error").inc()
            logger.error(f"Failed to save document: object_key={object_key}, owner_id={owner_id}, error={e}")
            raise PersistenceError(cause=e) from e

        uploads_total.labels(status="created").inc()
        logger.info(
            f"Document uploaded: document_id={created.id}, owner_id={owner_id}, "
            f"size={size_bytes}, mime_type={mime_type}"
        )
        return created

    async def upload_bytes(self, content: bytes, filename: str, owner_id: int) -> Document:
        """Same as upload() for in-memory content."""
        return await self.upload(io.BytesIO(content), filename, owner_id)

    async def _find_existing(self, hash_sha256: str, owner_id: int) -> Optional[Document]:
        try:
            return await self.repository.find_by_hash_and_owner(hash_sha256, owner_id)
        except Exception as e:
            # The write path stays authoritative when the lookup is unavailable
            logger.warning(f"Dedup lookup failed, continuing with upload: owner_id={owner_id}, error={e}")
            return None

    @staticmethod
    def _rewind(file: BinaryIO) -> None:
        try:
            file.seek(0)
        except (AttributeError, OSError, ValueError) as e:
            raise FileReadError(cause=e) from e
