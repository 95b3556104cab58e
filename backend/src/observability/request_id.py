"""Correlation ID management for HTTP requests and broker deliveries.

The same context variable carries the X-Request-ID of an HTTP request or the
message id of a broker delivery, so log lines of one unit of work correlate.
"""

import uuid
from contextvars import ContextVar, Token
from typing import Optional

# Context variable for request_id (async-safe)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID.

    Returns:
        str: UUID v4 request ID
    """
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get current request ID from context.

    Returns:
        str: Current request ID or "no-request-id" if not set
    """
    return request_id_var.get() or "no-request-id"


def set_request_id(request_id: Optional[str]) -> Token:
    """Set request ID in current context.

    Args:
        request_id: Request ID to set

    Returns:
        Token: Pass to reset_request_id() to restore the previous value
    """
    return request_id_var.set(request_id)


def reset_request_id(token: Token) -> None:
    request_id_var.reset(token)
