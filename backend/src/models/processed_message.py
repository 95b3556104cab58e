"""ProcessedMessage SQLAlchemy model - idempotency ledger for inbound events"""

from sqlalchemy import Column, DateTime, Index, String, Text

from .base import Base, utcnow


class ProcessedMessageRecord(Base):
    """One row per inbound event that was fully processed.

    Recording the same id again replaces the row; a scheduled task purges
    rows after expires_at.
    """
    __tablename__ = "processed_message"
    __table_args__ = (
        Index("ix_processed_message_expires_at", "expires_at"),
    )

    message_id = Column(String(255), primary_key=True)
    processed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    document_id = Column(String(36), nullable=False, default="")
    processed_by = Column(Text, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
