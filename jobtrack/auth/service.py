"""
JobTrack - Authentication Service

Credential store: registration, lookup and password checks for users.

Features:
- Bcrypt password hashing (passlib, fixed cost factor from settings)
- Field validation before anything touches the database
- Duplicate email detection, up front and via the unique index
- Login that distinguishes missing input (400) from bad credentials (401)
"""
from typing import Optional
import logging

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import AuthSettings, settings
from ..database import with_retry
from ..errors import AuthenticationError, ConflictError, ValidationError
from ..validation import normalize_email, validate_registration
from .models import User

logger = logging.getLogger("jobtrack.auth")


class AuthService:
    """
    Authentication service for user management.

    Provides:
    - Password hashing with bcrypt
    - User registration and lookup
    - Credential checks for login
    """

    def __init__(self, auth_settings: AuthSettings):
        """Initialize auth service with password context."""
        self._pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=auth_settings.bcrypt_rounds,
        )

    # -------------------------------------------------------------------------
    # Password Hashing
    # -------------------------------------------------------------------------

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Salted hash string
        """
        return self._pwd_context.hash(password)

    def verify_password(self, user: User, candidate: str) -> bool:
        """
        Verify a candidate password against the user's stored hash.

        passlib compares digests in constant time.

        Args:
            user: Stored user record
            candidate: Plain text password to verify

        Returns:
            True if password matches, False otherwise
        """
        if not user.hashed_password or candidate is None:
            return False
        try:
            return self._pwd_context.verify(candidate, user.hashed_password)
        except ValueError as e:
            logger.error(f"Password verification failed for user {user.id}: {e}")
            return False

    # -------------------------------------------------------------------------
    # User Management
    # -------------------------------------------------------------------------

    @with_retry
    def find_by_email(self, db: Session, email: Optional[str]) -> Optional[User]:
        """Return the user registered with an email, or None."""
        email = normalize_email(email)
        if not email:
            return None
        return db.query(User).filter(User.email == email).first()

    def register(self, db: Session, name: str, email: str, password: str) -> User:
        """
        Create a new user with a hashed password.

        Args:
            db: Database session
            name: Display name (3-50 characters)
            email: Email address, unique across users
            password: Plain text password (at least 8 characters)

        Returns:
            The created user

        Raises:
            ValidationError: if any field violates its constraints
            ConflictError: if the email is already registered
        """
        validate_registration(name, email, password)
        email = normalize_email(email)

        if self.find_by_email(db, email):
            raise ConflictError("email")

        user = User(
            name=name.strip(),
            email=email,
            hashed_password=self.hash_password(password),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            db.rollback()
            raise ConflictError("email")
        db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, db: Session, email: Optional[str], password: Optional[str]) -> User:
        """
        Check login credentials.

        Raises:
            ValidationError: if email or password is missing
            AuthenticationError: if the email is unknown or the password wrong
        """
        if not email or not email.strip() or not password or not password.strip():
            raise ValidationError("Please Provide Email and Password")

        user = self.find_by_email(db, email)
        if not user:
            raise AuthenticationError("Please Provide Valid Credentials")

        if not self.verify_password(user, password):
            logger.info(f"Failed login for user {user.id}")
            raise AuthenticationError("Please Provide Correct Password")

        return user


# Global service instance
auth_service = AuthService(settings.auth)
