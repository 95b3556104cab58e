"""Documents domain module - content addressing, document record, authentication status"""

from .authentication_status import (
    ALLOWED_TRANSITIONS,
    AuthenticationStatus,
    can_transition,
    status_for_result,
    transition,
)
from .content_addressing import calculate_sha256, object_key_from_hash
from .document import Document
from .mime_types import DEFAULT_MIME_TYPE, detect_mime_type

__all__ = [
    "ALLOWED_TRANSITIONS",
    "AuthenticationStatus",
    "can_transition",
    "status_for_result",
    "transition",
    "calculate_sha256",
    "object_key_from_hash",
    "Document",
    "DEFAULT_MIME_TYPE",
    "detect_mime_type",
]
