"""Ports (hexagonal architecture) for the documents domain."""

from .document_repository_port import DocumentRepositoryPort
from .messaging_port import MessageConsumerPort, MessageHandler, MessagePublisherPort
from .object_storage_port import ObjectStoragePort
from .processed_message_repository_port import (
    DEFAULT_LEDGER_TTL,
    ProcessedMessage,
    ProcessedMessageRepositoryPort,
)

__all__ = [
    "DocumentRepositoryPort",
    "MessageConsumerPort",
    "MessageHandler",
    "MessagePublisherPort",
    "ObjectStoragePort",
    "DEFAULT_LEDGER_TTL",
    "ProcessedMessage",
    "ProcessedMessageRepositoryPort",
]
