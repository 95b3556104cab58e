"""JWT token generation and validation

Caller identity is an opaque citizen id carried in the token; the service
never looks the caller up, it only scopes data by that id.

JWT Token Claims:
- sub: Citizen (owner) id as a decimal string, e.g. "1234567"
- id_citizen: Alternative integer claim used by some issuers
- iat / exp: Issued-at and expiration Unix timestamps

Security Properties:
- Algorithm: HS256 by default (JWT_ALGORITHM)
- Secret: JWT_SECRET setting
- Stateless validation (no database lookup required for auth)
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from config import get_settings


def create_access_token(owner_id: int, expires_in: timedelta = timedelta(minutes=60)) -> str:
    """Create a signed token for an owner (used by tests and local tooling).

    Args:
        owner_id: Citizen id put in the sub claim
        expires_in: Token lifetime

    Returns:
        str: Signed JWT token
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        'sub': str(owner_id),
        'iat': int(now.timestamp()),
        'exp': int((now + expires_in).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        dict: Decoded token payload with claims

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
    """
    settings = get_settings()

    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")


def owner_id_from_claims(payload: Dict[str, Any]) -> int:
    """Extract the owner id from token claims.

    Raises:
        ValueError: If neither sub nor id_citizen holds a positive integer
    """
    raw: Optional[Any] = payload.get("sub") or payload.get("id_citizen")
    if raw is None:
        raise ValueError("missing owner id claim")

    owner_id = int(raw)
    if owner_id <= 0:
        raise ValueError("owner id must be positive")
    return owner_id
