"""
JobTrack - SQLAlchemy ORM models

Job records owned by a single user. The user model lives in `auth.models`.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint, Index
from datetime import datetime

from .database import Base
from .validation import JOB_STATUSES, DEFAULT_JOB_STATUS, COMPANY_MAX_LENGTH

__all__ = ["Job", "JOB_STATUSES", "DEFAULT_JOB_STATUS"]


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    company = Column(String(COMPANY_MAX_LENGTH), nullable=False)
    position = Column(String, nullable=False)
    status = Column(String, nullable=False, default=DEFAULT_JOB_STATUS)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'interviewed', 'declined')",
            name="ck_jobs_status",
        ),
        Index("ix_jobs_created_by_status", "created_by", "status"),
    )

    def __repr__(self):
        return f"<Job id={self.id} company={self.company!r} status={self.status}>"
