"""AuthenticationStatus state machine for the document authentication lifecycle

State flow:
UNAUTHENTICATED → AUTHENTICATING → AUTHENTICATED
AUTHENTICATING → UNAUTHENTICATED when the external service rejects the document
"""

from enum import Enum
from typing import Dict, List, Optional

from .errors import ValidationError


class AuthenticationStatus(str, Enum):
    """Authentication status of a document

    Values are stored and exchanged in lowercase.
    """
    UNAUTHENTICATED = "unauthenticated"  # Uploaded, never sent (or rejected)
    AUTHENTICATING = "authenticating"    # Sent for authentication, awaiting result
    AUTHENTICATED = "authenticated"      # Confirmed by the external service

    def __str__(self) -> str:
        return self.value


# State transition rules
ALLOWED_TRANSITIONS: Dict[Optional[AuthenticationStatus], List[AuthenticationStatus]] = {
    None: [AuthenticationStatus.UNAUTHENTICATED],
    AuthenticationStatus.UNAUTHENTICATED: [AuthenticationStatus.AUTHENTICATING],
    AuthenticationStatus.AUTHENTICATING: [
        AuthenticationStatus.AUTHENTICATING,  # Re-request re-sends the event
        AuthenticationStatus.AUTHENTICATED,
        AuthenticationStatus.UNAUTHENTICATED,  # Rejected, can be resubmitted
    ],
    AuthenticationStatus.AUTHENTICATED: [],  # Terminal
}


def is_valid_status(value: object) -> bool:
    """Check whether a raw value is one of the authentication status values

    Example:
        >>> is_valid_status("authenticating")
        True
        >>> is_valid_status("pending")
        False
    """
    if isinstance(value, AuthenticationStatus):
        return True
    try:
        AuthenticationStatus(value)
    except ValueError:
        return False
    return True


def can_transition(
    from_status: Optional[AuthenticationStatus],
    to_status: AuthenticationStatus,
) -> bool:
    """Validate if status transition is allowed

    Args:
        from_status: Current status (None for new documents)
        to_status: Target status

    Returns:
        True if transition is allowed, False otherwise

    Example:
        >>> can_transition(AuthenticationStatus.UNAUTHENTICATED, AuthenticationStatus.AUTHENTICATING)
        True
        >>> can_transition(AuthenticationStatus.UNAUTHENTICATED, AuthenticationStatus.AUTHENTICATED)
        False
    """
    return to_status in ALLOWED_TRANSITIONS.get(from_status, [])


def get_allowed_transitions(from_status: Optional[AuthenticationStatus]) -> List[AuthenticationStatus]:
    """Get list of allowed transitions from current status"""
    return ALLOWED_TRANSITIONS.get(from_status, [])


def transition(
    from_status: Optional[AuthenticationStatus],
    to_status: AuthenticationStatus,
) -> AuthenticationStatus:
    """Return the target status, or raise if the move is not allowed

    Raises:
        ValidationError: If the transition is not in ALLOWED_TRANSITIONS
    """
    if not can_transition(from_status, to_status):
        current = from_status.value if from_status else "none"
        raise ValidationError(
            f"invalid authentication status transition: {current} -> {to_status.value}"
        )
    return to_status


def status_for_result(authenticated: bool) -> AuthenticationStatus:
    """Map an authentication result to the document's terminal status

    A failed authentication goes back to UNAUTHENTICATED so the document can
    be submitted again.
    """
    if authenticated:
        return AuthenticationStatus.AUTHENTICATED
    return AuthenticationStatus.UNAUTHENTICATED
