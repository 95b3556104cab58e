"""Document API request/response schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentResponse(BaseModel):
    """A stored document"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Document id")
    filename: str = Field(..., description="Original filename")
    mime_type: str = Field(..., description="MIME type detected from the extension")
    size_bytes: int = Field(..., description="File size in bytes")
    hash_sha256: str = Field(..., description="SHA256 hash (hex format)")
    url: str = Field("", description="Public or pre-signed URL (may be empty)")
    owner_id: int = Field(..., description="Citizen id owning the document")
    authentication_status: str = Field(..., description="unauthenticated | authenticating | authenticated")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DocumentListResponse(BaseModel):
    items: List[DocumentResponse]
    page: int
    limit: int
    total: int
    total_pages: int


class TransferItemResponse(BaseModel):
    document_id: str
    filename: str
    mime_type: str
    size_bytes: int
    hash_sha256: str
    url: str = Field(..., description="Pre-signed download URL")
    expires_at: datetime


class TransferResponse(BaseModel):
    """Pre-signed URLs for all of the caller's documents, sharing one expiry"""
    owner_id: int
    documents: List[TransferItemResponse]
    expires_at: Optional[datetime] = Field(None, description="Common expiry of all URLs (None when empty)")


class DeleteAllResponse(BaseModel):
    deleted: int


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
