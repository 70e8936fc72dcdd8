"""
Tests for the application gatekeeper.

Validates:
- Successful submission creates a pending application with joined view
- Check order: validation, job lookup, job status, duplicate
- Inactive and closed jobs are rejected identically
- At most one application per (job, user), also under concurrency
"""
import asyncio

import pytest

from jobboard.models.application import ApplicationStatus
from jobboard.models.user import UserRole
from jobboard.services.errors import (
    ValidationError,
    NotFoundError,
    InvalidStateError,
    ConflictError,
)
from jobboard.services.gatekeeper import submit_application, validate_submission

from fakes import make_user


COVER_LETTER = "A sufficiently long cover letter text..."


# =============================================================================
# Successful submission
# =============================================================================

@pytest.mark.asyncio
async def test_submit_creates_pending_application(fake_store, fake_user):
    view = await submit_application(fake_store, fake_user, 1, COVER_LETTER)

    assert view.job_id == 1
    assert view.user_id == fake_user.id
    assert view.status == ApplicationStatus.PENDING.value
    assert view.cover_letter == COVER_LETTER
    assert view.cv_link is None
    assert len(fake_store.applications) == 1


@pytest.mark.asyncio
async def test_submit_returns_job_and_user_snapshots(fake_store, fake_user):
    view = await submit_application(
        fake_store, fake_user, 1, COVER_LETTER, cv_link="https://cv.example.com/me.pdf"
    )

    assert view.job.id == 1
    assert view.job.title == "Job 1"
    assert view.job.status == "active"
    assert view.user.id == fake_user.id
    assert view.user.email == fake_user.email
    assert view.user.role == UserRole.USER
    assert view.cv_link == "https://cv.example.com/me.pdf"


@pytest.mark.asyncio
async def test_submit_trims_cover_letter_and_blank_cv_link(fake_store, fake_user):
    view = await submit_application(fake_store, fake_user, 1, f"   {COVER_LETTER}   ", cv_link="   ")

    assert view.cover_letter == COVER_LETTER
    assert view.cv_link is None


@pytest.mark.asyncio
async def test_same_user_may_apply_to_different_jobs(fake_store, fake_user):
    await submit_application(fake_store, fake_user, 1, COVER_LETTER)
    await submit_application(fake_store, fake_user, 4, COVER_LETTER)

    assert len(fake_store.applications) == 2


@pytest.mark.asyncio
async def test_different_users_may_apply_to_same_job(fake_store, fake_user, fake_other_user):
    await submit_application(fake_store, fake_user, 1, COVER_LETTER)
    await submit_application(fake_store, fake_other_user, 1, COVER_LETTER)

    assert len(fake_store.applications) == 2


# =============================================================================
# Validation
# =============================================================================

@pytest.mark.parametrize("length", [10, 2000])
def test_cover_letter_length_bounds_are_inclusive(length):
    cover_letter, _ = validate_submission("x" * length, None)
    assert len(cover_letter) == length


@pytest.mark.parametrize("length", [0, 9, 2001])
def test_cover_letter_out_of_bounds_rejected(length):
    with pytest.raises(ValidationError):
        validate_submission("x" * length, None)


def test_cover_letter_length_measured_after_trimming():
    with pytest.raises(ValidationError):
        validate_submission("   short   ", None)


def test_custom_bounds():
    with pytest.raises(ValidationError):
        validate_submission("x" * 20, None, min_length=50)
    cover_letter, _ = validate_submission("x" * 50, None, min_length=50)
    assert len(cover_letter) == 50


@pytest.mark.parametrize("cv_link", [
    "https://cv.example.com/me.pdf",
    "http://example.com/cv",
    "ftp://files.example.com/cv.pdf",
    "linkedin.com/in/jane",
    "www.example.com/cv.pdf",
])
def test_valid_cv_link_accepted(cv_link):
    """Links are stored as given; a missing scheme is not an error."""
    _, validated = validate_submission(COVER_LETTER, f"  {cv_link} ")

    assert validated == cv_link


@pytest.mark.parametrize("cv_link", [
    "not a url",
    "cv",
    "https://",
    "http://localhost/cv.pdf",
    "javascript://example.com/cv",
    "file:///home/jane/cv.pdf",
])
def test_invalid_cv_link_rejected(cv_link):
    with pytest.raises(ValidationError) as exc_info:
        validate_submission(COVER_LETTER, cv_link)
    assert exc_info.value.details["field"] == "cv_link"


@pytest.mark.asyncio
async def test_validation_runs_before_job_lookup(fake_store, fake_user):
    """A short cover letter is reported even when the job does not exist."""
    with pytest.raises(ValidationError):
        await submit_application(fake_store, fake_user, 999, "short")


# =============================================================================
# Job state
# =============================================================================

@pytest.mark.asyncio
async def test_unknown_job_not_found(fake_store, fake_user):
    with pytest.raises(NotFoundError):
        await submit_application(fake_store, fake_user, 999, COVER_LETTER)


@pytest.mark.asyncio
@pytest.mark.parametrize("job_id", [2, 3])  # closed, inactive
@pytest.mark.parametrize("role", [UserRole.USER, UserRole.ADMIN])
async def test_non_active_job_rejected_for_any_caller(fake_store, job_id, role):
    actor = make_user(50, role)

    with pytest.raises(InvalidStateError) as exc_info:
        await submit_application(fake_store, actor, job_id, COVER_LETTER)

    assert exc_info.value.message == "Cannot apply to inactive job"
    assert fake_store.applications == {}


# =============================================================================
# Duplicates
# =============================================================================

@pytest.mark.asyncio
async def test_second_submission_conflicts(fake_store, fake_user):
    await submit_application(fake_store, fake_user, 1, COVER_LETTER)

    with pytest.raises(ConflictError):
        await submit_application(fake_store, fake_user, 1, COVER_LETTER)

    assert len(fake_store.applications) == 1


@pytest.mark.asyncio
async def test_job_status_checked_before_duplicate(fake_store, fake_user):
    """Closing a job after applying reports INVALID_STATE, not CONFLICT."""
    await submit_application(fake_store, fake_user, 1, COVER_LETTER)
    fake_store.jobs[1].status = "closed"

    with pytest.raises(InvalidStateError):
        await submit_application(fake_store, fake_user, 1, COVER_LETTER)


@pytest.mark.asyncio
async def test_concurrent_duplicate_submissions(fake_store, fake_user):
    """Both requests pass the existence check; only one insert wins."""
    results = await asyncio.gather(
        submit_application(fake_store, fake_user, 1, COVER_LETTER),
        submit_application(fake_store, fake_user, 1, COVER_LETTER),
        return_exceptions=True,
    )

    conflicts = [r for r in results if isinstance(r, ConflictError)]
    created = [r for r in results if not isinstance(r, Exception)]
    assert len(created) == 1
    assert len(conflicts) == 1
    assert len(fake_store.applications) == 1


@pytest.mark.asyncio
async def test_insert_time_conflict_is_reported_as_conflict(fake_store, fake_user, monkeypatch):
    """A constraint violation on insert surfaces as CONFLICT, not an unexpected error."""
    await submit_application(fake_store, fake_user, 1, COVER_LETTER)

    async def missed_check(job_id, user_id):
        return None

    monkeypatch.setattr(fake_store, "find_application", missed_check)

    with pytest.raises(ConflictError):
        await submit_application(fake_store, fake_user, 1, COVER_LETTER)
