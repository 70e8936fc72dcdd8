"""
Jobs API endpoints.
Handles job posting CRUD operations.

Reads are public; anonymous and non-admin callers only see active jobs.
Writes require an admin.
"""
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_

from jobboard.config import settings
from jobboard.database import get_db
from jobboard.models.job import Job, JobType, JobStatus
from jobboard.models.application import Application
from jobboard.models.user import User
from jobboard.api.auth import get_optional_user, require_admin
from jobboard.schemas.job import (
    JobCreate,
    JobUpdate,
    JobResponse,
    JobListResponse,
)
from jobboard.schemas.application import MessageResponse
from jobboard.schemas.pagination import Pagination

# Configure logger
logger = logging.getLogger(__name__)

router = APIRouter()


async def _find_title_clash(
    db: AsyncSession,
    title: str,
    exclude_id: Optional[int] = None
) -> Optional[Job]:
    """An open (non-closed) job already using this title, if any."""
    query = select(Job).where(
        Job.title == title,
        Job.status != JobStatus.CLOSED.value
    )
    if exclude_id is not None:
        query = query.where(Job.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


def _check_salary_range(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise HTTPException(
            status_code=400,
            detail="Minimum salary cannot be greater than maximum salary"
        )


# ============================================================
# ENDPOINTS
# ============================================================

@router.get("/", response_model=JobListResponse)
async def list_jobs(
    title: Optional[str] = Query(None, description="Filter by title (partial match)"),
    location: Optional[str] = Query(None, description="Filter by location (partial match)"),
    job_type: Optional[JobType] = Query(None, alias="type", description="Filter by job type"),
    status: Optional[JobStatus] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.page_size_default, ge=1, le=settings.page_size_max),
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List job postings with optional filtering.
    Returns paginated results, newest first.
    """
    filters = []

    if title:
        filters.append(Job.title.ilike(f"%{title.strip()}%"))
    if location:
        filters.append(Job.location.ilike(f"%{location.strip()}%"))
    if job_type:
        filters.append(Job.type == job_type.value)

    if status:
        filters.append(Job.status == status.value)
    elif not current_user or not current_user.is_admin():
        # Non-admin users only see active jobs
        filters.append(Job.status == JobStatus.ACTIVE.value)

    count_query = select(func.count(Job.id))
    query = select(Job)
    if filters:
        count_query = count_query.where(and_(*filters))
        query = query.where(and_(*filters))

    total = (await db.execute(count_query)).scalar_one()

    query = query.order_by(Job.created_at.desc(), Job.id.desc()).offset((page - 1) * limit).limit(limit)
    result = await db.execute(query)
    jobs = result.scalars().all()

    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Get a job by ID. Non-admins cannot see jobs that are not active."""
    result = await db.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    if not job.is_active() and (not current_user or not current_user.is_admin()):
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.post("/", response_model=JobResponse, status_code=201)
async def create_job(
    job: JobCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new job posting (admin only).

    Returns 400 if an open job already uses the title or the salary range
    is inverted.
    """
    existing = await _find_title_clash(db, job.title.strip())
    if existing:
        raise HTTPException(
            status_code=400,
            detail=f"A job with this title already exists (id={existing.id})"
        )

    _check_salary_range(job.salary_min, job.salary_max)

    new_job = Job(
        title=job.title.strip(),
        description=job.description.strip(),
        company=job.company.strip(),
        location=job.location.strip(),
        salary_min=job.salary_min,
        salary_max=job.salary_max,
        type=job.type.value,
        status=job.status.value,
        posted_by=admin.id,
    )

    db.add(new_job)
    await db.commit()
    await db.refresh(new_job)

    logger.info(f"Created job {new_job.id}: {new_job.title} at {new_job.company}")

    return new_job


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    job_update: JobUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Partially update a job posting (admin only)."""
    result = await db.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    updates = job_update.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    if "title" in updates:
        existing = await _find_title_clash(db, updates["title"].strip(), exclude_id=job_id)
        if existing:
            raise HTTPException(
                status_code=400,
                detail=f"A job with this title already exists (id={existing.id})"
            )

    _check_salary_range(
        updates.get("salary_min", job.salary_min),
        updates.get("salary_max", job.salary_max),
    )

    for field, value in updates.items():
        if isinstance(value, (JobType, JobStatus)):
            value = value.value
        elif isinstance(value, str):
            value = value.strip()
        setattr(job, field, value)
    job.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(job)

    logger.info(f"Job {job_id} updated by admin {admin.id}: {sorted(updates)}")

    return job


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a job posting (admin only).

    Jobs with applications cannot be deleted; close them instead.
    """
    result = await db.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    application_count = (await db.execute(
        select(func.count(Application.id)).where(Application.job_id == job_id)
    )).scalar_one()

    if application_count > 0:
        raise HTTPException(
            status_code=400,
            detail='Cannot delete job with existing applications. Consider setting status to "closed" instead.'
        )

    await db.delete(job)
    await db.commit()

    logger.info(f"Job {job_id} deleted by admin {admin.id}")

    return MessageResponse(message="Job deleted successfully")
