"""Idempotent processing of at-least-once broker deliveries.

A message is recorded in the ledger only after its action succeeded, so a
failure before that point leads to redelivery and a second attempt.
"""

import logging
from datetime import timedelta
from typing import Awaitable, Callable, Optional

from domain.documents.ports.processed_message_repository_port import (
    DEFAULT_LEDGER_TTL,
    ProcessedMessage,
    ProcessedMessageRepositoryPort,
)

logger = logging.getLogger(__name__)


class ProcessedMessageLedger:
    """Tracks which inbound messages were already fully processed."""

    def __init__(self, repository: ProcessedMessageRepositoryPort, ttl: timedelta = DEFAULT_LEDGER_TTL):
        self.repository = repository
        self.ttl = ttl

    async def is_processed(self, message_id: Optional[str]) -> bool:
        """Check the ledger.

        A missing id is never processed. A ledger read failure is logged and
        treated as "not processed": the action runs again rather than being lost.
        """
        if not message_id:
            return False
        try:
            return await self.repository.check_if_processed(message_id)
        except Exception as e:
            logger.warning(f"Ledger lookup failed, treating as unprocessed: message_id={message_id}, error={e}")
            return False

    async def mark_processed(self, message_id: str, document_id: str, processed_by: str) -> None:
        """Record a processed message. Failures propagate so the broker redelivers."""
        entry = ProcessedMessage.create(
            message_id=message_id,
            document_id=document_id or "",
            processed_by=processed_by,
            ttl=self.ttl,
        )
        await self.repository.mark_as_processed(entry)

    async def run_once(
        self,
        message_id: Optional[str],
        document_id: str,
        processed_by: str,
        action: Callable[[], Awaitable[object]],
    ) -> bool:
        """Run action unless message_id was already processed, then record it.

        Without a message_id the action always runs and nothing is recorded.

        Returns:
            bool: False if the action was skipped as a duplicate
        """
        if await self.is_processed(message_id):
            logger.info(f"Skipping already processed message: message_id={message_id}, handler={processed_by}")
            return False

        await action()

        if message_id:
            await self.mark_processed(message_id, document_id, processed_by)
        return True
