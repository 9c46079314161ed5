"""
JobTrack - Pydantic schemas for request/response validation.

Request bodies only describe the shape of a job payload; constraints
(required fields, lengths, status values) are enforced by
`jobtrack.validation` so all violations are reported together.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


# --- Job Schemas ---

class JobBase(BaseModel):
    company: Optional[str] = None
    position: Optional[str] = None
    status: Optional[str] = None


class JobCreate(JobBase):
    pass


class JobUpdate(JobBase):
    pass


class JobResponse(BaseModel):
    id: int
    company: str
    position: str
    status: str
    created_by: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JobEnvelope(BaseModel):
    job: JobResponse


class JobList(BaseModel):
    jobs: List[JobResponse]
    Count: int


class JobStats(BaseModel):
    total: int
    pending: int
    interviewed: int
    declined: int
