"""Bulk export of an owner's documents as pre-signed URLs"""

from .service import MAX_TRANSFER_DOCUMENTS, TransferItem, TransferService

__all__ = ["MAX_TRANSFER_DOCUMENTS", "TransferItem", "TransferService"]
