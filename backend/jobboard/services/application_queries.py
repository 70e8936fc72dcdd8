"""
Read-side queries for applications.

Non-admin callers only ever see their own applications; admins may filter
by job and status.
"""
import logging
from typing import Optional

from jobboard.config import settings
from jobboard.models.user import User, UserRole
from jobboard.schemas.application import (
    ApplicationListResponse,
    ApplicationView,
    JobApplicationsResponse,
    JobSnapshot,
)
from jobboard.schemas.pagination import Pagination
from jobboard.services.application_status import require_role
from jobboard.services.application_views import build_application_view, build_application_views
from jobboard.services.errors import ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


async def list_applications(
    store,
    actor: User,
    job_id: Optional[int] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: Optional[int] = None
) -> ApplicationListResponse:
    """List applications visible to actor, newest first, one page at a time."""
    limit = settings.page_size_default if limit is None else limit
    if page < 1:
        raise ValidationError("page must be at least 1")
    if not 1 <= limit <= settings.page_size_max:
        raise ValidationError(f"limit must be between 1 and {settings.page_size_max}")

    # Users can only see their own applications, admins can see all
    user_id = None if actor.is_admin() else actor.id

    total = await store.count_applications(job_id=job_id, status=status, user_id=user_id)
    applications = await store.list_applications(
        job_id=job_id,
        status=status,
        user_id=user_id,
        offset=(page - 1) * limit,
        limit=limit,
    )

    return ApplicationListResponse(
        applications=await build_application_views(store, applications),
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


async def get_application(store, actor: User, application_id: int) -> ApplicationView:
    """
    Raises:
        NotFoundError: application does not exist
        ForbiddenError: non-admin actor does not own it
    """
    application = await store.get_application(application_id)
    if not application:
        raise NotFoundError("Application not found", details={"application_id": application_id})

    if not actor.is_admin() and application.user_id != actor.id:
        raise ForbiddenError("Access denied")

    return await build_application_view(store, application)


async def list_job_applications(store, actor: User, job_id: int) -> JobApplicationsResponse:
    """All applications for one job, for admin review."""
    require_role(actor, UserRole.ADMIN)

    job = await store.get_job(job_id)
    if not job:
        raise NotFoundError("Job not found", details={"job_id": job_id})

    applications = await store.list_applications(job_id=job_id)
    return JobApplicationsResponse(
        job=JobSnapshot.model_validate(job),
        applications=await build_application_views(store, applications),
    )
