"""
JobTrack - Owner-scoped persistence for job records.

Every operation takes the caller's user_id and filters by it, so a job is
only ever visible to or mutable by the user who created it. Jobs belonging
to other users are reported exactly like jobs that don't exist.
"""
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from .database import with_retry
from .errors import ValidationError
from .models import Job
from .query_helpers import owner_query, get_owned_or_404
from .validation import JOB_STATUSES, validate_job, validate_job_update

logger = logging.getLogger("jobtrack.jobs")

SORT_OPTIONS = {
    "latest": Job.created_at.desc(),
    "oldest": Job.created_at.asc(),
    "a-z": Job.position.asc(),
    "z-a": Job.position.desc(),
}


class JobStore:
    """Job CRUD bound to one database session."""

    def __init__(self, db: Session):
        self.db = db

    @with_retry
    def list_by_owner(
        self,
        user_id: int,
        status: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> List[Job]:
        """
        Return the owner's jobs, in insertion order unless `sort` is given.

        Args:
            user_id: Owner whose jobs to list
            status: Only jobs with this status ("all" or None for every status)
            search: Case-insensitive substring of company or position
            sort: One of "latest", "oldest", "a-z", "z-a"
        """
        query = owner_query(self.db, Job, user_id)

        if status and status != "all":
            if status not in JOB_STATUSES:
                raise ValidationError("Please Provide a Valid Status (pending / interviewed / declined)")
            query = query.filter(Job.status == status)

        if search and search.strip():
            term = f"%{search.strip()}%"
            query = query.filter(or_(Job.company.ilike(term), Job.position.ilike(term)))

        if sort:
            if sort not in SORT_OPTIONS:
                raise ValidationError(f"Sort must be one of {' / '.join(SORT_OPTIONS)}")
            query = query.order_by(SORT_OPTIONS[sort], Job.id.asc())
        else:
            query = query.order_by(Job.id.asc())

        return query.all()

    def get_by_id_and_owner(self, job_id, user_id: int) -> Job:
        """Fetch one owned job or raise NotFoundError."""
        return get_owned_or_404(self.db, Job, job_id, user_id, "Job")

    def create(self, user_id: int, data: Dict[str, Any]) -> Job:
        """Validate and insert a job owned by user_id."""
        fields = validate_job(data)
        job = Job(**fields, created_by=user_id)
        self.db.add(job)
        self.db.commit()
        self.db.refresh(job)
        logger.info(f"User {user_id} created job {job.id}")
        return job

    def update_by_id_and_owner(self, job_id, user_id: int, data: Dict[str, Any]) -> Job:
        """
        Replace company/position (and optionally status) of an owned job.

        Raises:
            ValidationError: if company or position is missing, or a field
                violates its constraints
            NotFoundError: if the caller owns no job with that id
        """
        fields = validate_job_update(data)
        job = self.get_by_id_and_owner(job_id, user_id)
        for key, value in fields.items():
            setattr(job, key, value)
        self.db.commit()
        self.db.refresh(job)
        logger.info(f"User {user_id} updated job {job.id}")
        return job

    def delete_by_id_and_owner(self, job_id, user_id: int) -> None:
        """Remove an owned job or raise NotFoundError."""
        job = self.get_by_id_and_owner(job_id, user_id)
        self.db.delete(job)
        self.db.commit()
        logger.info(f"User {user_id} deleted job {job_id}")

    def stats_by_owner(self, user_id: int) -> Dict[str, int]:
        """Count the owner's jobs per status."""
        counts = {status: 0 for status in JOB_STATUSES}
        rows = owner_query(self.db, Job, user_id).with_entities(
            Job.status, func.count(Job.id)
        ).group_by(Job.status).all()
        for status, count in rows:
            counts[status] = count
        return {"total": sum(counts.values()), **counts}
