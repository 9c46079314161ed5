"""
JobTrack client - local token and preference storage.

The session token lives in a file under the user's home directory, the
terminal equivalent of browser localStorage. Claims are read without
verifying the signature: only the server can do that, the client just
needs the name and expiry.
"""
from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging
import time

from jose import JWTError, jwt

logger = logging.getLogger("jobtrack.client")


class TokenStorage:
    """Persists one session token."""

    def __init__(self, path):
        self.path = Path(path).expanduser()

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token)
        self.path.chmod(0o600)

    def get(self) -> Optional[str]:
        if not self.path.exists():
            return None
        token = self.path.read_text().strip()
        return token or None

    def remove(self) -> None:
        if self.path.exists():
            self.path.unlink()

    def claims(self) -> Optional[Dict[str, Any]]:
        """Decode the stored token's claims, or None if absent or undecodable."""
        token = self.get()
        if not token:
            return None
        try:
            return jwt.get_unverified_claims(token)
        except JWTError:
            return None

    def is_valid(self) -> bool:
        """True if a decodable, unexpired token is stored. Bad tokens are removed."""
        claims = self.claims()
        if claims is None:
            if self.get():
                logger.debug("Removing undecodable token")
                self.remove()
            return False
        exp = claims.get("exp")
        if exp is not None and exp < time.time():
            logger.debug("Removing expired token")
            self.remove()
            return False
        return True

    def user(self) -> Optional[Dict[str, Any]]:
        """The identity embedded in the stored token."""
        claims = self.claims()
        if claims is None:
            return None
        return {
            "userId": claims.get("userId"),
            "name": claims.get("name"),
            "exp": claims.get("exp"),
            "iat": claims.get("iat"),
        }


class PrefsStorage:
    """Client-only preferences (currently just the theme). Never sent to the server."""

    def __init__(self, path):
        self.path = Path(path).expanduser()

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text())
        except ValueError:
            logger.warning(f"Ignoring unreadable preferences file {self.path}")
            return {}

    def get_theme(self, default: str = "light") -> str:
        return self.load().get("theme", default)

    def set_theme(self, theme: str) -> None:
        prefs = self.load()
        prefs["theme"] = theme
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(prefs, indent=2))
