"""Domain error taxonomy for the document lifecycle

Every error carries a machine-readable code and a human message, and may wrap
the underlying cause (also chained via ``raise ... from``).
"""

from typing import Optional


ERR_CODE_VALIDATION = "VALIDATION_ERROR"
ERR_CODE_FILE_READ = "FILE_READ_ERROR"
ERR_CODE_HASH_CALCULATE = "HASH_CALCULATE_ERROR"
ERR_CODE_STORAGE_UPLOAD = "STORAGE_UPLOAD_ERROR"
ERR_CODE_PERSISTENCE = "PERSISTENCE_ERROR"
ERR_CODE_NOT_FOUND = "NOT_FOUND"
ERR_CODE_STATUS_UPDATE = "STATUS_UPDATE_ERROR"
ERR_CODE_URL_GENERATION = "URL_GENERATION_ERROR"
ERR_CODE_PUBLISH = "PUBLISH_ERROR"


class DomainError(Exception):
    """Base exception for document lifecycle failures."""

    code = "DOMAIN_ERROR"
    default_message = "document operation failed"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class ValidationError(DomainError):
    """Malformed input or an entity that breaks its invariants. Never retried."""

    code = ERR_CODE_VALIDATION
    default_message = "validation failed"


class EventPayloadError(ValidationError):
    """Inbound event payload could not be parsed."""

    default_message = "malformed event payload"


class FileReadError(DomainError):
    code = ERR_CODE_FILE_READ
    default_message = "failed to read file"


class HashCalculationError(DomainError):
    code = ERR_CODE_HASH_CALCULATE
    default_message = "failed to calculate file hash"


class StorageUploadError(DomainError):
    code = ERR_CODE_STORAGE_UPLOAD
    default_message = "failed to upload to storage"


class PersistenceError(DomainError):
    code = ERR_CODE_PERSISTENCE
    default_message = "failed to persist document"


class NotFoundError(DomainError):
    code = ERR_CODE_NOT_FOUND
    default_message = "document not found"


class DuplicateDocumentError(PersistenceError):
    """The owner already has a document with this content hash.

    Raised by repositories when the (hash_sha256, owner_id) uniqueness
    rule rejects an insert, e.g. after losing a race with a concurrent
    upload of the same bytes.
    """

    default_message = "document with this content already exists for owner"


class StatusUpdateError(PersistenceError):
    """Authentication status could not be written before the request was sent."""

    code = ERR_CODE_STATUS_UPDATE
    default_message = "failed to update authentication status"


class UrlGenerationError(DomainError):
    code = ERR_CODE_URL_GENERATION
    default_message = "failed to generate pre-signed URL"


class PublishError(DomainError):
    code = ERR_CODE_PUBLISH
    default_message = "failed to publish event"
