"""
JobTrack - Authentication Dependencies

The access filter: FastAPI dependencies that authenticate a request and
attach the caller's identity to it.

Usage in routers:
    from ..auth.dependencies import get_current_user

    @router.get("/protected")
    def protected_route(current_user: CurrentUser = Depends(get_current_user)):
        return {"user_id": current_user.user_id}

The filter only answers "is this a valid token". Ownership of individual
records is enforced by the job store, which filters every query by the
caller's user_id.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import logging

from ..errors import AuthenticationError
from .schemas import CurrentUser
from .tokens import session_issuer

logger = logging.getLogger("jobtrack.auth")

# auto_error=False so missing or non-bearer headers reach our own error
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """
    Authenticate the request from its `Authorization: Bearer <token>` header.

    On success the identity is also stored on `request.state.user`.

    Raises:
        AuthenticationError: 401 if the header is absent, malformed, or the
            token fails verification
    """
    if credentials is None or not credentials.credentials.strip():
        logger.debug("No bearer token provided")
        raise AuthenticationError("Authentication Invalid")

    claims = session_issuer.verify(credentials.credentials.strip())

    current_user = CurrentUser(user_id=claims.user_id, name=claims.name)
    request.state.user = current_user
    return current_user
