"""Processed message repository - SQL storage for the idempotency ledger"""

from datetime import datetime

from sqlalchemy import delete, select

from domain.documents.ports.processed_message_repository_port import (
    ProcessedMessage,
    ProcessedMessageRepositoryPort,
)
from models.base import utcnow
from models.processed_message import ProcessedMessageRecord
from .base import SqlRepository


class SqlProcessedMessageRepository(SqlRepository, ProcessedMessageRepositoryPort):

    async def check_if_processed(self, message_id: str) -> bool:
        def _check() -> bool:
            query = select(ProcessedMessageRecord.message_id).where(
                ProcessedMessageRecord.message_id == message_id,
                ProcessedMessageRecord.expires_at > utcnow(),
            )
            with self._session() as session:
                return session.execute(query).first() is not None

        return await self._run(_check)

    async def mark_as_processed(self, entry: ProcessedMessage) -> None:
        def _mark() -> None:
            record = ProcessedMessageRecord(
                message_id=entry.message_id,
                processed_at=entry.processed_at,
                document_id=entry.document_id,
                processed_by=entry.processed_by,
                expires_at=entry.expires_at,
            )
            # merge by primary key: re-recording an id refreshes the entry
            with self._session() as session:
                session.merge(record)

        await self._run(_mark)

    async def purge_expired(self, now: datetime) -> int:
        def _purge() -> int:
            with self._session() as session:
                result = session.execute(
                    delete(ProcessedMessageRecord).where(ProcessedMessageRecord.expires_at < now)
                )
                return result.rowcount or 0

        return await self._run(_purge)
