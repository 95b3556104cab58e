"""SQLAlchemy Models for the document service"""

from .base import Base
from .document import DocumentRecord
from .processed_message import ProcessedMessageRecord

__all__ = [
    "Base",
    "DocumentRecord",
    "ProcessedMessageRecord",
]
