"""Read access to an owner's documents"""

from .service import DocumentPage, DocumentQueryService

__all__ = ["DocumentPage", "DocumentQueryService"]
