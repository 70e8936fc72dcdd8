"""
Storage access for the application workflow.

The gatekeeper, status authority and query handlers receive a store object
instead of touching the session directly, so tests can swap in an in-memory
implementation with the same methods.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, delete, func, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.application import Application, ApplicationStatus
from jobboard.models.job import Job
from jobboard.models.user import User
from jobboard.services.errors import ConflictError

logger = logging.getLogger(__name__)

# Postgres names the violated constraint; SQLite lists its columns
DUPLICATE_APPLICATION_MARKERS = (
    "uq_application_job_user",
    "applications.job_id, applications.user_id",
)


def is_duplicate_application(exc: IntegrityError) -> bool:
    """True when exc is the (job_id, user_id) unique constraint, not another integrity failure."""
    message = str(exc.orig)
    return any(marker in message for marker in DUPLICATE_APPLICATION_MARKERS)


class SqlAlchemyApplicationStore:
    """Application store backed by an AsyncSession (one per request)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Directories (read-only from the workflow's point of view)

    async def get_job(self, job_id: int) -> Optional[Job]:
        result = await self.db.execute(select(Job).where(Job.id == job_id))
        return result.scalar_one_or_none()

    async def get_user(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    # Applications

    async def get_application(self, application_id: int) -> Optional[Application]:
        result = await self.db.execute(
            select(Application).where(Application.id == application_id)
        )
        return result.scalar_one_or_none()

    async def find_application(self, job_id: int, user_id: int) -> Optional[Application]:
        result = await self.db.execute(
            select(Application).where(
                Application.job_id == job_id,
                Application.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def add_application(
        self,
        job_id: int,
        user_id: int,
        cover_letter: str,
        cv_link: Optional[str] = None
    ) -> Application:
        """
        Insert a pending application.

        Raises:
            ConflictError: the (job_id, user_id) unique constraint rejected
                the insert, i.e. a concurrent submission won the race.
        """
        now = datetime.utcnow()
        application = Application(
            job_id=job_id,
            user_id=user_id,
            cover_letter=cover_letter,
            cv_link=cv_link,
            status=ApplicationStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        self.db.add(application)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            if not is_duplicate_application(exc):
                logger.error(f"Integrity error adding application for job {job_id} by user {user_id}: {exc.orig}")
                raise
            logger.info(
                f"Unique constraint rejected application for job {job_id} by user {user_id}"
            )
            raise ConflictError("You have already applied to this job")
        await self.db.refresh(application)
        return application

    async def update_application_status(
        self,
        application: Application,
        status: ApplicationStatus
    ) -> Application:
        application.status = status.value
        application.updated_at = datetime.utcnow()
        await self.db.commit()
        await self.db.refresh(application)
        return application

    async def delete_application(self, application: Application) -> None:
        await self.db.execute(
            delete(Application).where(Application.id == application.id)
        )
        await self.db.commit()

    def _filters(
        self,
        job_id: Optional[int],
        status: Optional[str],
        user_id: Optional[int]
    ) -> list:
        filters = []
        if job_id is not None:
            filters.append(Application.job_id == job_id)
        if status is not None:
            filters.append(Application.status == status)
        if user_id is not None:
            filters.append(Application.user_id == user_id)
        return filters

    async def list_applications(
        self,
        job_id: Optional[int] = None,
        status: Optional[str] = None,
        user_id: Optional[int] = None,
        offset: int = 0,
        limit: Optional[int] = None
    ) -> list[Application]:
        """List applications newest first, optionally filtered and paged."""
        query = select(Application)
        filters = self._filters(job_id, status, user_id)
        if filters:
            query = query.where(and_(*filters))

        query = query.order_by(
            Application.created_at.desc(),
            Application.id.desc()
        ).offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_applications(
        self,
        job_id: Optional[int] = None,
        status: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> int:
        query = select(func.count(Application.id))
        filters = self._filters(job_id, status, user_id)
        if filters:
            query = query.where(and_(*filters))
        result = await self.db.execute(query)
        return result.scalar_one()
