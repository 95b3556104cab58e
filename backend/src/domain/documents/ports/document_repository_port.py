"""Document Repository Port - Domain interface for document metadata persistence.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..authentication_status import AuthenticationStatus
from ..document import Document


class DocumentRepositoryPort(ABC):
    """Durable store for Document records keyed by id and by (hash, owner).

    Implementations raise their own exceptions on store failures; the
    services translate them into domain errors.
    """

    @abstractmethod
    async def create(self, document: Document) -> Document:
        """Persist a new document, assigning id and timestamps when missing.

        Raises:
            DuplicateDocumentError: If the owner already has a document
                with the same hash_sha256
        """

    @abstractmethod
    async def find_by_hash_and_owner(self, hash_sha256: str, owner_id: int) -> Optional[Document]:
        """Return the owner's document with this content hash, if any."""

    @abstractmethod
    async def get_by_id(self, document_id: str) -> Optional[Document]:
        """Return a document by id, or None."""

    @abstractmethod
    async def count_by_object_key(self, object_key: str) -> int:
        """Return how many documents (of any owner) reference this storage key."""

    @abstractmethod
    async def list(self, owner_id: int, limit: int, offset: int) -> Tuple[List[Document], int]:
        """Return one page of the owner's documents (newest first) and the total count."""

    @abstractmethod
    async def delete_by_id(self, document_id: str) -> Optional[Document]:
        """Delete a document and return the deleted record, or None if it did not exist."""

    @abstractmethod
    async def delete_all_by_owner(self, owner_id: int) -> int:
        """Delete every document of an owner and return how many were deleted."""

    @abstractmethod
    async def update_authentication_status(self, document_id: str, status: AuthenticationStatus) -> bool:
        """Set the authentication status (and updated_at).

        Returns:
            bool: False if no document has this id
        """
