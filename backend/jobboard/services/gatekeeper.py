"""
Application gatekeeper.
Decides whether a submission request becomes a persisted application.

Checks run in a fixed order and the first failure wins:
1. Cover letter length and cv_link format (VALIDATION)
2. Job exists (NOT_FOUND)
3. Job is active (INVALID_STATE)
4. No earlier application by the same user for the job (CONFLICT)

The duplicate check is a fast path for a friendly error. Two concurrent
submissions can both pass it, so the store's unique constraint on
(job_id, user_id) is what actually enforces one application per pair and
its violation is reported as the same CONFLICT.
"""
import logging
import re
from typing import Annotated, Optional

from pydantic import AnyUrl, TypeAdapter, UrlConstraints
from pydantic import ValidationError as PydanticValidationError

from jobboard.config import settings
from jobboard.models.user import User
from jobboard.schemas.application import ApplicationView
from jobboard.services.application_views import build_application_view
from jobboard.services.errors import (
    ValidationError,
    NotFoundError,
    InvalidStateError,
    ConflictError,
)

logger = logging.getLogger(__name__)

CV_LINK_SCHEMES = ["http", "https", "ftp"]

_scheme_pattern = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_url_adapter = TypeAdapter(Annotated[AnyUrl, UrlConstraints(allowed_schemes=CV_LINK_SCHEMES)])


def is_valid_cv_link(cv_link: str) -> bool:
    """
    Check a CV link the way applicants actually paste them.

    A link without a scheme (``linkedin.com/in/jane``) is checked as https.
    The host must contain a dot, so bare words and ``localhost`` are refused.
    """
    candidate = cv_link if _scheme_pattern.match(cv_link) else f"https://{cv_link}"
    try:
        url = _url_adapter.validate_python(candidate)
    except PydanticValidationError:
        return False
    return bool(url.host) and "." in url.host


def validate_submission(
    cover_letter: str,
    cv_link: Optional[str],
    min_length: Optional[int] = None,
    max_length: Optional[int] = None
) -> tuple[str, Optional[str]]:
    """
    Normalize and validate the free-text fields of a submission.

    Returns:
        (cover_letter, cv_link) trimmed; a blank cv_link becomes None.

    Raises:
        ValidationError: cover letter out of bounds or cv_link not a URL
    """
    min_length = settings.cover_letter_min_length if min_length is None else min_length
    max_length = settings.cover_letter_max_length if max_length is None else max_length

    cover_letter = (cover_letter or "").strip()
    if not min_length <= len(cover_letter) <= max_length:
        raise ValidationError(
            f"Cover letter must be between {min_length} and {max_length} characters",
            details={"field": "cover_letter", "length": len(cover_letter)}
        )

    cv_link = cv_link.strip() if cv_link else None
    if cv_link and not is_valid_cv_link(cv_link):
        raise ValidationError(
            "cv_link must be a valid URL",
            details={"field": "cv_link"}
        )

    return cover_letter, cv_link


async def submit_application(
    store,
    actor: User,
    job_id: int,
    cover_letter: str,
    cv_link: Optional[str] = None
) -> ApplicationView:
    """
    Submit an application on behalf of actor.

    Args:
        store: Application store (see services.application_store)
        actor: Authenticated user submitting the application
        job_id: Target job
        cover_letter: Free text, bounded by configured lengths
        cv_link: Optional URL to the applicant's CV

    Returns:
        The created application joined with job and user snapshots

    Raises:
        ValidationError, NotFoundError, InvalidStateError, ConflictError
    """
    cover_letter, cv_link = validate_submission(cover_letter, cv_link)

    job = await store.get_job(job_id)
    if not job:
        raise NotFoundError("Job not found", details={"job_id": job_id})

    if not job.is_active():
        logger.info(f"User {actor.id} tried to apply to job {job_id} in status {job.status}")
        raise InvalidStateError(
            "Cannot apply to inactive job",
            details={"job_id": job_id, "job_status": job.status}
        )

    existing = await store.find_application(job_id, actor.id)
    if existing:
        raise ConflictError(
            "You have already applied to this job",
            details={"application_id": existing.id}
        )

    application = await store.add_application(
        job_id=job_id,
        user_id=actor.id,
        cover_letter=cover_letter,
        cv_link=cv_link,
    )

    logger.info(f"Application {application.id} submitted by user {actor.id} for job {job_id}")

    return await build_application_view(store, application)
