"""
Authentication dependencies for route handlers.
"""

from typing import Optional
from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from trinity.utils.jwt import decode_access_token

security = HTTPBearer()
security_optional = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UUID:
    """
    Extract and validate user_id from the bearer token.

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    user_id = decode_access_token(credentials.credentials)

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user_id


def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
) -> Optional[UUID]:
    """user_id from the bearer token if one was sent, otherwise None."""
    if credentials is None:
        return None

    return decode_access_token(credentials.credentials)


def ensure_owner(user_id: UUID, authenticated_user_id: Optional[UUID]) -> None:
    """Reject reads of another user's data when the caller is authenticated."""
    if authenticated_user_id is not None and user_id != authenticated_user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="user_id does not match authenticated user",
        )
