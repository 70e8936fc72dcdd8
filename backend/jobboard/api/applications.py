"""
Applications API endpoints.
Thin HTTP layer over the gatekeeper, the status authority and the
application queries. Domain errors raised by those services are mapped to
HTTP responses by the handler registered in jobboard.main.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import settings
from jobboard.database import get_db
from jobboard.models.application import ApplicationStatus
from jobboard.models.user import User
from jobboard.api.auth import get_current_user
from jobboard.schemas.application import (
    ApplicationCreate,
    ApplicationStatusUpdate,
    ApplicationView,
    ApplicationListResponse,
    JobApplicationsResponse,
    MessageResponse,
)
from jobboard.services.application_store import SqlAlchemyApplicationStore
from jobboard.services import application_queries
from jobboard.services.application_status import transition_application, delete_application
from jobboard.services.gatekeeper import submit_application

logger = logging.getLogger(__name__)
router = APIRouter()


async def get_application_store(
    db: AsyncSession = Depends(get_db)
) -> SqlAlchemyApplicationStore:
    """Per-request application store bound to the request's session."""
    return SqlAlchemyApplicationStore(db)


# Endpoints
@router.get("/", response_model=ApplicationListResponse)
async def list_applications(
    job_id: Optional[int] = Query(None, ge=1, description="Filter by job ID"),
    status: Optional[ApplicationStatus] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.page_size_default, ge=1, le=settings.page_size_max),
    current_user: User = Depends(get_current_user),
    store: SqlAlchemyApplicationStore = Depends(get_application_store)
):
    """
    List applications, newest first.

    Admins see all applications; other users only their own, whatever
    filters they pass.
    """
    return await application_queries.list_applications(
        store,
        current_user,
        job_id=job_id,
        status=status.value if status else None,
        page=page,
        limit=limit,
    )


@router.post("/send", response_model=ApplicationView, status_code=201)
async def send_application(
    request: ApplicationCreate,
    current_user: User = Depends(get_current_user),
    store: SqlAlchemyApplicationStore = Depends(get_application_store)
):
    """
    Submit an application for a job.

    Returns:
        201: Application created (joined with job and user)
        400: Invalid cover letter/cv_link, inactive job, or duplicate
        404: Job not found
    """
    return await submit_application(
        store,
        current_user,
        job_id=request.job_id,
        cover_letter=request.cover_letter,
        cv_link=request.cv_link,
    )


@router.get("/job/{job_id}", response_model=JobApplicationsResponse)
async def list_job_applications(
    job_id: int,
    current_user: User = Depends(get_current_user),
    store: SqlAlchemyApplicationStore = Depends(get_application_store)
):
    """Get all applications for a job (admin only)."""
    return await application_queries.list_job_applications(store, current_user, job_id)


@router.get("/{application_id}", response_model=ApplicationView)
async def get_application(
    application_id: int,
    current_user: User = Depends(get_current_user),
    store: SqlAlchemyApplicationStore = Depends(get_application_store)
):
    """Get a single application. Non-admins can only read their own."""
    return await application_queries.get_application(store, current_user, application_id)


@router.patch("/{application_id}/status", response_model=ApplicationView)
async def update_application_status(
    application_id: int,
    update: ApplicationStatusUpdate,
    current_user: User = Depends(get_current_user),
    store: SqlAlchemyApplicationStore = Depends(get_application_store)
):
    """
    Change an application's status (admin only).

    Any status may be set from any status.
    """
    return await transition_application(store, current_user, application_id, update.status)


@router.delete("/{application_id}", response_model=MessageResponse)
async def remove_application(
    application_id: int,
    current_user: User = Depends(get_current_user),
    store: SqlAlchemyApplicationStore = Depends(get_application_store)
):
    """Delete an application. Allowed for its owner and for admins."""
    await delete_application(store, current_user, application_id)
    return MessageResponse(message="Application deleted successfully")
