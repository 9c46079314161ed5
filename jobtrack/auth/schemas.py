"""
JobTrack - Authentication Schemas

Pydantic schemas for auth request/response shapes. Field constraints are
checked by `jobtrack.validation` so every violation is reported at once.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


# -----------------------------------------------------------------------------
# Request Schemas
# -----------------------------------------------------------------------------

class UserCreate(BaseModel):
    """Schema for user registration."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    """Schema for user login."""
    email: Optional[str] = None
    password: Optional[str] = None


# -----------------------------------------------------------------------------
# Response Schemas
# -----------------------------------------------------------------------------

class UserSummary(BaseModel):
    """Public user data returned alongside a token."""
    name: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Schema for register and login responses."""
    user: UserSummary
    token: str


# -----------------------------------------------------------------------------
# Token Schemas
# -----------------------------------------------------------------------------

class TokenClaims(BaseModel):
    """Decoded session token claims (internal use)."""
    user_id: int
    name: str
    iat: datetime
    exp: datetime


class CurrentUser(BaseModel):
    """Identity attached to the request by the access filter."""
    user_id: int
    name: str
