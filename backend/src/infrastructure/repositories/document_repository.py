"""Document repository for database operations"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError

from domain.documents.authentication_status import AuthenticationStatus
from domain.documents.document import Document
from domain.documents.errors import DuplicateDocumentError
from domain.documents.ports.document_repository_port import DocumentRepositoryPort
from models.base import as_utc, utcnow
from models.document import DocumentRecord
from .base import SqlRepository

logger = logging.getLogger(__name__)


def _to_domain(record: DocumentRecord) -> Document:
    return Document(
        id=record.id,
        filename=record.filename,
        mime_type=record.mime_type,
        size_bytes=record.size_bytes,
        hash_sha256=record.hash_sha256,
        bucket=record.bucket,
        object_key=record.object_key,
        url=record.url or "",
        owner_id=record.owner_id,
        authentication_status=AuthenticationStatus(record.authentication_status),
        created_at=as_utc(record.created_at),
        updated_at=as_utc(record.updated_at),
    )


class SqlDocumentRepository(SqlRepository, DocumentRepositoryPort):
    """Repository for document table operations.

    Lists are ordered newest first. Hash lookups are case-insensitive on
    input but stored digests are always lowercase.
    """

    async def create(self, document: Document) -> Document:
        def _create() -> Document:
            now = utcnow()
            record = DocumentRecord(
                filename=document.filename,
                mime_type=document.mime_type,
                size_bytes=document.size_bytes,
                hash_sha256=document.hash_sha256.lower(),
                bucket=document.bucket,
                object_key=document.object_key,
                url=document.url or "",
                owner_id=document.owner_id,
                authentication_status=document.status or AuthenticationStatus.UNAUTHENTICATED,
                created_at=document.created_at or now,
                updated_at=document.updated_at or now,
            )
            if document.id:
                record.id = document.id

            try:
                with self._session() as session:
                    session.add(record)
                    session.flush()
                    return _to_domain(record)
            except IntegrityError as e:
                # ux_document_hash_owner; any other integrity failure propagates
                if self._find_sync(document.hash_sha256, document.owner_id) is None:
                    raise
                logger.warning(
                    f"Duplicate document detected: owner_id={document.owner_id}, "
                    f"sha256={document.hash_sha256}"
                )
                raise DuplicateDocumentError(cause=e) from e

        return await self._run(_create)

    def _find_sync(self, hash_sha256: str, owner_id: int) -> Optional[Document]:
        query = select(DocumentRecord).where(
            DocumentRecord.hash_sha256 == hash_sha256.lower(),
            DocumentRecord.owner_id == owner_id,
        )
        with self._session() as session:
            record = session.execute(query).scalars().first()
            return _to_domain(record) if record else None

    async def find_by_hash_and_owner(self, hash_sha256: str, owner_id: int) -> Optional[Document]:
        return await self._run(lambda: self._find_sync(hash_sha256, owner_id))

    async def count_by_object_key(self, object_key: str) -> int:
        def _count() -> int:
            with self._session() as session:
                return session.execute(
                    select(func.count()).select_from(DocumentRecord).where(DocumentRecord.object_key == object_key)
                ).scalar_one()

        return await self._run(_count)

    async def get_by_id(self, document_id: str) -> Optional[Document]:
        def _get() -> Optional[Document]:
            with self._session() as session:
                record = session.get(DocumentRecord, document_id)
                return _to_domain(record) if record else None

        return await self._run(_get)

    async def list(self, owner_id: int, limit: int, offset: int) -> Tuple[List[Document], int]:
        def _list() -> Tuple[List[Document], int]:
            with self._session() as session:
                total = session.execute(
                    select(func.count()).select_from(DocumentRecord).where(DocumentRecord.owner_id == owner_id)
                ).scalar_one()

                query = (
                    select(DocumentRecord)
                    .where(DocumentRecord.owner_id == owner_id)
                    .order_by(DocumentRecord.created_at.desc(), DocumentRecord.id)
                    .limit(limit)
                    .offset(offset)
                )
                records = session.execute(query).scalars().all()
                return [_to_domain(r) for r in records], total

        return await self._run(_list)

    async def delete_by_id(self, document_id: str) -> Optional[Document]:
        def _delete() -> Optional[Document]:
            with self._session() as session:
                record = session.get(DocumentRecord, document_id)
                if record is None:
                    return None
                document = _to_domain(record)
                session.delete(record)
                return document

        return await self._run(_delete)

    async def delete_all_by_owner(self, owner_id: int) -> int:
        def _delete_all() -> int:
            with self._session() as session:
                result = session.execute(
                    delete(DocumentRecord).where(DocumentRecord.owner_id == owner_id)
                )
                return result.rowcount or 0

        deleted = await self._run(_delete_all)
        logger.debug(f"Deleted {deleted} document rows for owner_id={owner_id}")
        return deleted

    async def update_authentication_status(self, document_id: str, status: AuthenticationStatus) -> bool:
        def _update() -> bool:
            with self._session() as session:
                result = session.execute(
                    update(DocumentRecord)
                    .where(DocumentRecord.id == document_id)
                    .values(authentication_status=status, updated_at=utcnow())
                )
                return (result.rowcount or 0) > 0

        return await self._run(_update)
