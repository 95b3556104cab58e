"""Document SQLAlchemy model

Document represents an uploaded citizen file: its storage location,
content fingerprint and authentication status.
"""

import uuid

from sqlalchemy import BigInteger, Column, DateTime, Enum as SQLEnum, Index, String, Text

from domain.documents.authentication_status import AuthenticationStatus
from .base import Base, utcnow


class DocumentRecord(Base):
    """Document row.

    The (hash_sha256, owner_id) pair is unique: the same bytes uploaded twice
    by one owner map to one row, while two owners each get their own.
    """
    __tablename__ = "document"
    __table_args__ = (
        Index("ix_document_owner_id", "owner_id"),
        Index("ux_document_hash_owner", "hash_sha256", "owner_id", unique=True),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    filename = Column(Text, nullable=False)
    mime_type = Column(Text, nullable=False)
    size_bytes = Column(BigInteger, nullable=False)
    hash_sha256 = Column(String(64), nullable=False)  # hex string
    bucket = Column(Text, nullable=False)
    object_key = Column(Text, nullable=False)
    url = Column(Text, nullable=False, default="")
    owner_id = Column(BigInteger, nullable=False)
    authentication_status = Column(
        SQLEnum(
            AuthenticationStatus,
            name="authenticationstatus",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=AuthenticationStatus.UNAUTHENTICATED,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<DocumentRecord(id={self.id}, owner_id={self.owner_id}, status={self.authentication_status})>"
