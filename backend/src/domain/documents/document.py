"""Document domain entity

This is the domain model (not the database model). Repositories convert
between it and models.document.DocumentRecord.
"""

import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Union

from .authentication_status import AuthenticationStatus, is_valid_status
from .errors import ValidationError


SHA256_HEX_LENGTH = 64
_SHA256_PATTERN = re.compile(r"^[0-9a-f]{64}$")


@dataclass
class Document:
    """A file uploaded by a citizen, with its storage location and workflow state.

    Attributes:
        filename: Original filename
        mime_type: MIME type detected from the filename extension
        size_bytes: File size in bytes
        hash_sha256: SHA256 of the content (64 lowercase hex chars), dedup fingerprint with owner_id
        bucket: Object storage bucket name
        object_key: Object storage key ({hash[:2]}/{hash}{ext})
        owner_id: Citizen id that owns the document
        authentication_status: Current authentication state
        id: Unique id, assigned by the repository on create
        url: Public URL when the bucket is exposed, or a pre-signed URL on reads
        created_at: Server-assigned creation time
        updated_at: Server-assigned last update time
    """
    filename: str
    mime_type: str
    size_bytes: int
    hash_sha256: str
    bucket: str
    object_key: str
    owner_id: int
    authentication_status: Optional[Union[AuthenticationStatus, str]] = AuthenticationStatus.UNAUTHENTICATED
    id: Optional[str] = None
    url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def validate(self) -> None:
        """Check the document invariants before it is persisted.

        Raises:
            ValidationError: On the first violated invariant
        """
        if not self.filename or not self.filename.strip():
            raise ValidationError("filename cannot be empty")

        if self.size_bytes is None or self.size_bytes <= 0:
            raise ValidationError("file size must be greater than zero")

        if not self.hash_sha256 or not _SHA256_PATTERN.match(self.hash_sha256):
            raise ValidationError(
                f"invalid SHA256 hash format (expected {SHA256_HEX_LENGTH} lowercase hex characters)"
            )

        if self.owner_id is None or self.owner_id <= 0:
            raise ValidationError("owner ID must be greater than zero")

        if not self.object_key or not self.object_key.strip():
            raise ValidationError("object key cannot be empty")

        if not self.bucket or not self.bucket.strip():
            raise ValidationError("bucket name cannot be empty")

        if self.authentication_status and not is_valid_status(self.authentication_status):
            raise ValidationError("invalid authentication status")

    @property
    def status(self) -> Optional[AuthenticationStatus]:
        """Authentication status as an enum (None when unset)."""
        if not self.authentication_status:
            return None
        return AuthenticationStatus(self.authentication_status)

    def with_status(self, status: AuthenticationStatus, updated_at: Optional[datetime] = None) -> "Document":
        """Return a copy carrying a new authentication status."""
        return replace(self, authentication_status=status, updated_at=updated_at or self.updated_at)

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary representation"""
        status = self.status
        return {
            "id": self.id,
            "filename": self.filename,
            "mime_type": self.mime_type,
            "size_bytes": self.size_bytes,
            "hash_sha256": self.hash_sha256,
            "bucket": self.bucket,
            "object_key": self.object_key,
            "url": self.url,
            "owner_id": self.owner_id,
            "authentication_status": status.value if status else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
