"""FastAPI dependencies for caller identity.

Usage:
    @router.get("/documents")
    async def list_documents(owner_id: int = Depends(get_current_owner_id)):
        ...
"""

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .jwt import decode_token, owner_id_from_claims


# HTTP Bearer token security scheme
security = HTTPBearer()


def get_current_owner_id(credentials: HTTPAuthorizationCredentials = Depends(security)) -> int:
    """Validate the Bearer token and return the caller's owner id.

    Raises:
        HTTPException 401: If token is missing, invalid, expired, or has no owner id
    """
    token = credentials.credentials

    try:
        payload = decode_token(token)
        return owner_id_from_claims(payload)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )
