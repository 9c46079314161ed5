"""
JobTrack - CRUD API for job records.

Every endpoint takes the owner from the authenticated identity, never from
the request body, and hands it to the job store as the ownership filter.
"""
from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from ..auth.dependencies import get_current_user
from ..auth.schemas import CurrentUser
from ..database import get_db
from ..job_store import JobStore
from ..rate_limit import limiter, RATE_LIMIT_GENERAL, RATE_LIMIT_READ
from ..schemas import JobCreate, JobUpdate, JobEnvelope, JobList, JobStats

router = APIRouter()


def get_job_store(db: Session = Depends(get_db)) -> JobStore:
    return JobStore(db)


@router.get("", response_model=JobList)
@limiter.limit(RATE_LIMIT_READ)
def list_jobs(
    request: Request,
    status_filter: Optional[str] = Query(None, alias="status", description="pending, interviewed, declined or all"),
    search: Optional[str] = Query(None, description="Substring of company or position"),
    sort: Optional[str] = Query(None, description="latest, oldest, a-z or z-a"),
    store: JobStore = Depends(get_job_store),
    current_user: CurrentUser = Depends(get_current_user)
):
    """List the current user's jobs with optional filters."""
    jobs = store.list_by_owner(current_user.user_id, status=status_filter, search=search, sort=sort)
    return {"jobs": jobs, "Count": len(jobs)}


@router.get("/stats", response_model=JobStats)
@limiter.limit(RATE_LIMIT_READ)
def get_job_stats(
    request: Request,
    store: JobStore = Depends(get_job_store),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Count the current user's jobs per status."""
    return store.stats_by_owner(current_user.user_id)


@router.get("/{job_id}", response_model=JobEnvelope)
@limiter.limit(RATE_LIMIT_READ)
def get_job(
    request: Request,
    job_id: str,
    store: JobStore = Depends(get_job_store),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Get a specific job."""
    return {"job": store.get_by_id_and_owner(job_id, current_user.user_id)}


@router.post("", response_model=JobEnvelope, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_GENERAL)
def create_job(
    request: Request,
    job: JobCreate,
    store: JobStore = Depends(get_job_store),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a new job."""
    return {"job": store.create(current_user.user_id, job.model_dump())}


@router.patch("/{job_id}", response_model=JobEnvelope)
@limiter.limit(RATE_LIMIT_GENERAL)
def update_job(
    request: Request,
    job_id: str,
    job: JobUpdate,
    store: JobStore = Depends(get_job_store),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update a job. Company and position are required on every update."""
    return {"job": store.update_by_id_and_owner(job_id, current_user.user_id, job.model_dump())}


@router.delete("/{job_id}")
@limiter.limit(RATE_LIMIT_GENERAL)
def delete_job(
    request: Request,
    job_id: str,
    store: JobStore = Depends(get_job_store),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Delete a job."""
    store.delete_by_id_and_owner(job_id, current_user.user_id)
    return Response(status_code=status.HTTP_200_OK)
