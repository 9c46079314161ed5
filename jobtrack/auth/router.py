"""
JobTrack - Authentication Router

API endpoints for user authentication.

Endpoints:
    POST /auth/register   - Create an account -> {user: {name}, token}
    POST /auth/login      - Email/password login -> {user: {name}, token}
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..rate_limit import limiter, RATE_LIMIT_AUTH
from .schemas import UserCreate, UserLogin, AuthResponse, UserSummary
from .service import auth_service
from .tokens import session_issuer

logger = logging.getLogger("jobtrack.auth")
router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_AUTH)
async def register(
    request: Request,
    user_data: UserCreate,
    db: Session = Depends(get_db),
):
    """
    Register a new user with name, email and password.

    Requires:
    - Name between 3 and 50 characters
    - Valid, unused email address
    - Password with at least 8 characters

    Returns the user's name and a session token.
    """
    user = auth_service.register(db, user_data.name, user_data.email, user_data.password)
    token = session_issuer.issue(user)
    return AuthResponse(user=UserSummary(name=user.name), token=token)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(RATE_LIMIT_AUTH)
async def login(
    request: Request,
    credentials: UserLogin,
    db: Session = Depends(get_db),
):
    """
    Login with email and password.

    Returns the user's name and a session token.
    """
    user = auth_service.authenticate(db, credentials.email, credentials.password)
    token = session_issuer.issue(user)
    logger.info(f"User {user.id} logged in")
    return AuthResponse(user=UserSummary(name=user.name), token=token)
