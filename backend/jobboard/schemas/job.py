"""Job-related Pydantic schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from jobboard.models.job import JobType, JobStatus
from jobboard.schemas.pagination import Pagination


class JobBase(BaseModel):
    """Base schema with common job posting fields."""
    title: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=10)
    company: str = Field(min_length=2, max_length=100)
    location: str = Field(min_length=2, max_length=100)
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    type: JobType = JobType.FULL_TIME
    status: JobStatus = JobStatus.ACTIVE


class JobCreate(JobBase):
    """Schema for creating a new job posting."""
    pass


class JobUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=10)
    company: Optional[str] = Field(None, min_length=2, max_length=100)
    location: Optional[str] = Field(None, min_length=2, max_length=100)
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    type: Optional[JobType] = None
    status: Optional[JobStatus] = None


class JobResponse(BaseModel):
    """Schema for job posting response."""
    id: int
    title: str
    description: str
    company: str
    location: str
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    type: str
    status: str
    posted_by: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JobListResponse(BaseModel):
    """Paginated job listing."""
    jobs: list[JobResponse]
    pagination: Pagination
