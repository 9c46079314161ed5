"""
JobTrack - Authentication Models

SQLAlchemy model for registered users.
"""
from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime

from ..database import Base
from ..validation import NAME_MAX_LENGTH


class User(Base):
    """User model for authentication."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<User id={self.id} email={self.email!r}>"
