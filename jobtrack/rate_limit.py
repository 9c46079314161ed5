"""
JobTrack - Centralized rate limiting configuration.

All rate limit decorators should import `limiter` from this module.
The limiter keys on client IP address.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)

# --- Rate limit constants ---

# Auth endpoints (login, register): strict
RATE_LIMIT_AUTH = "5/minute"

# Job write operations (create, update, delete): moderate
RATE_LIMIT_GENERAL = "30/minute"

# Read-heavy endpoints (list, get, stats): generous
RATE_LIMIT_READ = "60/minute"
