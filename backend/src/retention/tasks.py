"""Celery tasks for ledger retention.

Tasks:
- purge_processed_messages_task: Daily job removing expired idempotency entries
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from celery import shared_task

from database import SessionLocal, get_engine
from infrastructure.repositories.processed_message_repository import SqlProcessedMessageRepository

logger = logging.getLogger(__name__)


async def purge_processed_messages(repository: SqlProcessedMessageRepository) -> Dict[str, Any]:
    """Delete ledger entries whose expires_at has passed."""
    started_at = datetime.now(timezone.utc)
    deleted = await repository.purge_expired(started_at)
    return {
        "status": "completed",
        "deleted": deleted,
        "started_at": started_at.isoformat(),
    }


@shared_task(name="retention.purge_processed_messages", bind=True)
def purge_processed_messages_task(self) -> Dict[str, Any]:
    """Purge expired processed-message entries.

    Scheduled daily via Celery Beat (see workers.celery_app). Idempotent:
    a second run right after the first deletes nothing.

    Returns:
        Dict with status and number of deleted entries
    """
    logger.info("Processed message purge task started")

    get_engine()
    repository = SqlProcessedMessageRepository(SessionLocal)
    try:
        result = asyncio.run(purge_processed_messages(repository))
    except Exception as e:
        logger.error("Processed message purge task failed", exc_info=True)
        return {"status": "failed", "error": str(e), "deleted": 0}

    logger.info(f"Processed message purge completed: deleted={result['deleted']}")
    return result
