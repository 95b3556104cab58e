"""Observability module.

Provides structured logging, correlation ids, metrics, and health checks.
"""

from .logging_config import configure_logging
from .request_id import generate_request_id, get_request_id, request_id_var, set_request_id

__all__ = [
    "configure_logging",
    "generate_request_id",
    "get_request_id",
    "request_id_var",
    "set_request_id",
]
