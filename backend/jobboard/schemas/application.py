"""Application-related Pydantic schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from jobboard.models.user import UserRole
from jobboard.schemas.pagination import Pagination


class ApplicationCreate(BaseModel):
    """
    Submission request.

    Length and URL checks are left to the gatekeeper so that they run in
    its documented order.
    """
    job_id: int
    cover_letter: str
    cv_link: Optional[str] = None


class ApplicationStatusUpdate(BaseModel):
    """
    Admin status change.

    Kept as a plain string so the admin check runs before the value is
    validated.
    """
    status: str


class JobSnapshot(BaseModel):
    """Job fields embedded in an application view."""
    id: int
    title: str
    description: str
    company: str
    location: str
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    type: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserSnapshot(BaseModel):
    """Applicant fields embedded in an application view."""
    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ApplicationView(BaseModel):
    """Application joined with its job and applicant, built on read."""
    id: int
    job_id: int
    user_id: int
    cover_letter: str
    cv_link: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
    job: Optional[JobSnapshot] = None
    user: Optional[UserSnapshot] = None


class ApplicationListResponse(BaseModel):
    """Paginated application listing."""
    applications: list[ApplicationView]
    pagination: Pagination


class JobApplicationsResponse(BaseModel):
    """All applications for one job (admin view)."""
    job: JobSnapshot
    applications: list[ApplicationView]


class MessageResponse(BaseModel):
    message: str
