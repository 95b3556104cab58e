"""Document API endpoints.

Provides REST API for uploading, listing, reading, deleting and transferring
a citizen's documents and for sending them to authentication.

Every endpoint is scoped to the caller's owner id from the Bearer token;
documents of other owners are reported as not found.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from auth.dependencies import get_current_owner_id
from dependencies import ServiceContainer, get_container
from domain.documents.document import Document
from domain.documents.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .schemas import (
    DeleteAllResponse,
    DocumentListResponse,
    DocumentResponse,
    ErrorResponse,
    TransferItemResponse,
    TransferResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/documents",
    tags=["documents"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def _to_response(document: Document) -> DocumentResponse:
    return DocumentResponse(**document.to_dict())


@router.post("/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    owner_id: int = Depends(get_current_owner_id),
    services: ServiceContainer = Depends(get_container),
):
    """Upload a document.

    Uploading content the caller already stored returns the existing
    document instead of creating a second one.
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File name is required",
        )

    document = await services.uploads.upload(file.file, file.filename, owner_id)
    return _to_response(document)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    page: int = Query(1, description="Page number (1-based)"),
    limit: int = Query(DEFAULT_PAGE_SIZE, description=f"Page size (max {MAX_PAGE_SIZE})"),
    owner_id: int = Depends(get_current_owner_id),
    services: ServiceContainer = Depends(get_container),
):
    """List the caller's documents, newest first."""
    result = await services.queries.list(owner_id, page=page, limit=limit)
    return DocumentListResponse(
        items=[_to_response(d) for d in result.items],
        page=result.page,
        limit=result.limit,
        total=result.total,
        total_pages=result.total_pages,
    )


@router.post("/transfer", response_model=TransferResponse)
async def transfer_documents(
    owner_id: int = Depends(get_current_owner_id),
    services: ServiceContainer = Depends(get_container),
):
    """Issue pre-signed URLs for all of the caller's documents (one shared expiry)."""
    items = await services.transfers.prepare_transfer(owner_id)
    return TransferResponse(
        owner_id=owner_id,
        documents=[TransferItemResponse(**item.to_dict()) for item in items],
        expires_at=items[0].expires_at if items else None,
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    owner_id: int = Depends(get_current_owner_id),
    services: ServiceContainer = Depends(get_container),
):
    """Get a document with a short-lived pre-signed URL."""
    document = await services.queries.get(document_id, owner_id=owner_id)
    return _to_response(document)


@router.delete("/{document_id}", response_model=DocumentResponse)
async def delete_document(
    document_id: str,
    owner_id: int = Depends(get_current_owner_id),
    services: ServiceContainer = Depends(get_container),
):
    """Delete a document and its stored file."""
    await services.queries.get_owned(document_id, owner_id)
    deleted = await services.deletions.delete(document_id)
    return _to_response(deleted)


@router.delete("", response_model=DeleteAllResponse)
async def delete_all_documents(
    owner_id: int = Depends(get_current_owner_id),
    services: ServiceContainer = Depends(get_container),
):
    """Delete all of the caller's documents."""
    deleted = await services.deletions.delete_all(owner_id)
    return DeleteAllResponse(deleted=deleted)


@router.post(
    "/{document_id}/request-authentication",
    response_model=DocumentResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def request_authentication(
    document_id: str,
    owner_id: int = Depends(get_current_owner_id),
    services: ServiceContainer = Depends(get_container),
):
    """Send a document to the external authentication service.

    The document is AUTHENTICATING when this returns; the result arrives
    asynchronously.
    """
    await services.queries.get_owned(document_id, owner_id)
    document = await services.authentication.request_authentication(document_id)
    return _to_response(document)
