"""SQLAlchemy adapters for the repository ports"""

from .document_repository import SqlDocumentRepository
from .processed_message_repository import SqlProcessedMessageRepository

__all__ = ["SqlDocumentRepository", "SqlProcessedMessageRepository"]
