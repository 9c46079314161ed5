"""
JobTrack - Authentication Module

Email/password accounts with stateless JWT sessions.

Usage:
    from jobtrack.auth import get_current_user, CurrentUser

    @router.get("/protected")
    def protected_route(current_user: CurrentUser = Depends(get_current_user)):
        return {"user_id": current_user.user_id}

Configuration (environment variables):
    JOBTRACK_SECRET_KEY=<key>              - JWT signing key (required in production)
    JOBTRACK_TOKEN_LIFETIME_MINUTES=43200  - Session token lifetime
    JOBTRACK_BCRYPT_ROUNDS=10              - Password hashing cost factor
"""

# Models
from .models import User

# Schemas
from .schemas import CurrentUser, TokenClaims

# Services
from .service import auth_service, AuthService
from .tokens import session_issuer, SessionIssuer

# Dependencies (for use in routers)
from .dependencies import get_current_user

# Router (for mounting in main.py)
from .router import router

__all__ = [
    # Models
    "User",
    # Schemas
    "CurrentUser",
    "TokenClaims",
    # Services
    "auth_service",
    "AuthService",
    "session_issuer",
    "SessionIssuer",
    # Dependencies
    "get_current_user",
    # Router
    "router",
]
