"""Object Storage Port - Domain interface for S3-compatible storage.

This port defines the contract for storing blobs under hash-derived keys and
granting time-limited access to them.
Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import BinaryIO


class ObjectStoragePort(ABC):
    """Port interface for S3-compatible object storage operations.

    Implementations must be safe for concurrent callers.

    Example Usage:
        storage = S3StorageAdapter(...)

        with open('invoice.pdf', 'rb') as f:
            await storage.put(f, 'ab/ab12....pdf', 'application/pdf')

        url = await storage.generate_presigned_url('ab/ab12....pdf', timedelta(minutes=15))
    """

    @property
    @abstractmethod
    def bucket_name(self) -> str:
        """Name of the bucket/container objects are written to."""

    @abstractmethod
    async def put(self, body: BinaryIO, object_key: str, content_type: str) -> None:
        """Store the bytes of a stream under a key.

        Args:
            body: Readable binary stream positioned at the start of the content
            object_key: Storage key (see domain.documents.content_addressing)
            content_type: MIME type stored with the object

        Raises:
            StorageError: If the upload fails
        """

    @abstractmethod
    async def delete(self, object_key: str) -> None:
        """Delete an object. Deleting a missing key is not an error.

        Raises:
            StorageError: If deletion fails
        """

    @abstractmethod
    def public_url(self, object_key: str) -> str:
        """Public URL of an object, or "" when the bucket is not publicly exposed."""

    @abstractmethod
    async def generate_presigned_url(self, object_key: str, expires_in: timedelta) -> str:
        """Generate a presigned URL for direct download.

        Args:
            object_key: Storage key of the object
            expires_in: Validity of the URL

        Returns:
            str: Presigned URL (valid for expires_in)

        Raises:
            StorageError: If URL generation fails
        """
