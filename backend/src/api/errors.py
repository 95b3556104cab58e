"""Mapping of domain errors to HTTP responses"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from domain.documents.errors import (
    ERR_CODE_FILE_READ,
    ERR_CODE_NOT_FOUND,
    ERR_CODE_PUBLISH,
    ERR_CODE_VALIDATION,
    DomainError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    ERR_CODE_VALIDATION: status.HTTP_400_BAD_REQUEST,
    ERR_CODE_FILE_READ: status.HTTP_400_BAD_REQUEST,
    ERR_CODE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ERR_CODE_PUBLISH: status.HTTP_502_BAD_GATEWAY,
}


def status_for_error(error: DomainError) -> int:
    """HTTP status for a domain error; anything unmapped is a 500.

    Example:
        >>> status_for_error(NotFoundError())
        404
    """
    return _STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a DomainError as {"error": code, "message": message}."""
    status_code = status_for_error(exc)
    if status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc}", exc_info=exc)
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())
