"""
Bearer token verification.

Tokens are issued by the account service; this module only resolves the
owner id (the ``sub`` claim) from a signed token.
"""

from typing import Optional

from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import settings
from app.exceptions import Unauthenticated

security = HTTPBearer(auto_error=False)


def resolve_owner(token: Optional[str]) -> str:
    """Return the owner id carried by a valid token, else raise Unauthenticated."""
    if not token:
        raise Unauthenticated("Not authorized, no token")

    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise Unauthenticated(f"Invalid token: {e}") from e

    subject = claims.get("sub")
    if not subject:
        raise Unauthenticated("Invalid token: missing subject")
    return str(subject)


async def get_current_owner(
        credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """
    FastAPI dependency resolving the authenticated owner id.
    Usage: owner_id: str = Depends(get_current_owner)
    """
    return resolve_owner(credentials.credentials if credentials else None)
