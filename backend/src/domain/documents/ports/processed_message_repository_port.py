"""Processed Message Repository Port - idempotency ledger for inbound events.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


DEFAULT_LEDGER_TTL = timedelta(days=7)


@dataclass(frozen=True)
class ProcessedMessage:
    """Ledger entry for an inbound event that was fully processed.

    Attributes:
        message_id: Unique id of the inbound event (ledger key)
        processed_at: When processing finished
        document_id: Related document id, for reference
        processed_by: Name of the handler that processed it
        expires_at: When the entry may be purged
    """
    message_id: str
    processed_at: datetime
    document_id: str
    processed_by: str
    expires_at: datetime

    @classmethod
    def create(
        cls,
        message_id: str,
        document_id: str,
        processed_by: str,
        ttl: timedelta = DEFAULT_LEDGER_TTL,
        now: Optional[datetime] = None,
    ) -> "ProcessedMessage":
        """Build an entry processed now that expires after ttl (7 days by default)."""
        processed_at = now or datetime.now(timezone.utc)
        return cls(
            message_id=message_id,
            processed_at=processed_at,
            document_id=document_id,
            processed_by=processed_by,
            expires_at=processed_at + ttl,
        )


class ProcessedMessageRepositoryPort(ABC):

    @abstractmethod
    async def check_if_processed(self, message_id: str) -> bool:
        """True if an unexpired entry exists for this message id."""

    @abstractmethod
    async def mark_as_processed(self, entry: ProcessedMessage) -> None:
        """Record an entry. Re-recording the same message id is not an error."""

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Delete entries whose expires_at is before now; returns the count."""
