"""
JobTrack - Session token issuing and verification.

Session tokens are stateless JWTs signed with the configured secret. Nothing
is stored server-side: a token is valid while its signature checks out and
it has not expired. Logout only discards the token on the client.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import JWTError, jwt

from ..config import AuthSettings, settings
from ..errors import AuthenticationError
from .schemas import TokenClaims

logger = logging.getLogger("jobtrack.auth")


class SessionIssuer:
    """Mints and checks signed session tokens carrying {userId, name}."""

    def __init__(self, auth_settings: AuthSettings, lifetime: Optional[timedelta] = None):
        self._secret_key = auth_settings.secret_key
        self._algorithm = auth_settings.algorithm
        self.lifetime = lifetime if lifetime is not None else timedelta(
            minutes=auth_settings.token_lifetime_minutes
        )

    def issue(self, user) -> str:
        """Create a signed token for a user."""
        issued_at = datetime.now(timezone.utc)
        payload = {
            "userId": user.id,
            "name": user.name,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        logger.debug(f"Issued session token for user {user.id}")
        return token

    def verify(self, token: str) -> TokenClaims:
        """
        Verify and decode a session token.

        Raises:
            AuthenticationError: if the token is malformed, forged, expired
                or missing required claims
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            raise AuthenticationError("Authentication Invalid")

        user_id = payload.get("userId")
        name = payload.get("name")
        if user_id is None or name is None or "exp" not in payload:
            logger.warning("Token missing required claims")
            raise AuthenticationError("Authentication Invalid")

        return TokenClaims(
            user_id=int(user_id),
            name=name,
            iat=datetime.fromtimestamp(payload.get("iat", 0), tz=timezone.utc),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


# Process-wide issuer built from the settings loaded at startup
session_issuer = SessionIssuer(settings.auth)
