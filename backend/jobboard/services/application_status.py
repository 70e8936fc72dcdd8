"""
Status transition authority for applications.
ALL status changes and deletions go through this module.

Only admins may change a status. Every status is reachable from every
other status: the table below decides which transitions exist, and today
it allows all of them. Deletion is open to the owner and to admins,
regardless of status.
"""
import logging
from typing import Dict, Union

from jobboard.models.application import ApplicationStatus
from jobboard.models.user import User, UserRole
from jobboard.schemas.application import ApplicationView
from jobboard.services.application_views import build_application_view
from jobboard.services.errors import (
    ForbiddenError,
    NotFoundError,
    InvalidStateError,
    ValidationError,
)

# Configure logger
logger = logging.getLogger(__name__)


# Define allowed status transitions
ALLOWED_TRANSITIONS: Dict[ApplicationStatus, list[ApplicationStatus]] = {
    from_status: list(ApplicationStatus) for from_status in ApplicationStatus
}


def can_transition(from_status: ApplicationStatus, to_status: ApplicationStatus) -> bool:
    """Check if a transition is allowed without modifying the database"""
    return to_status in ALLOWED_TRANSITIONS.get(from_status, [])


def require_role(actor: User, role: UserRole) -> None:
    """
    Capability check run at the start of an operation.

    Raises:
        ForbiddenError: actor does not hold role
    """
    if actor.role != role:
        logger.warning(
            f"User {actor.id} (role={UserRole(actor.role).value}) lacks required role {role.value}"
        )
        raise ForbiddenError(
            "Admin access required" if role == UserRole.ADMIN else f"{role.value} access required"
        )


def _coerce_status(value: Union[ApplicationStatus, str]) -> ApplicationStatus:
    try:
        return ApplicationStatus(value)
    except ValueError:
        raise ValidationError(
            f"Invalid status {value!r}",
            details={"allowed": [s.value for s in ApplicationStatus]}
        )


async def transition_application(
    store,
    actor: User,
    application_id: int,
    new_status: Union[ApplicationStatus, str]
) -> ApplicationView:
    """
    Set an application's status.

    Args:
        store: Application store
        actor: Authenticated user; must be an admin
        application_id: Application to update
        new_status: One of pending, reviewed, accepted, rejected

    Returns:
        Updated application joined with job and user snapshots

    Raises:
        ForbiddenError: actor is not an admin (checked before any load)
        ValidationError: new_status is not a known status
        NotFoundError: application does not exist
    """
    require_role(actor, UserRole.ADMIN)
    to_status = _coerce_status(new_status)

    application = await store.get_application(application_id)
    if not application:
        raise NotFoundError("Application not found", details={"application_id": application_id})

    from_status = ApplicationStatus(application.status)
    if not can_transition(from_status, to_status):
        raise InvalidStateError(
            f"Invalid transition from {from_status.value} to {to_status.value}"
        )

    application = await store.update_application_status(application, to_status)

    logger.info(
        f"Application status transition: {from_status.value} → {to_status.value}",
        extra={
            "application_id": application_id,
            "from_status": from_status.value,
            "to_status": to_status.value,
            "actor_id": actor.id,
        }
    )

    return await build_application_view(store, application)


async def delete_application(store, actor: User, application_id: int) -> None:
    """
    Hard-delete an application.

    Raises:
        NotFoundError: application does not exist
        ForbiddenError: actor is neither the owner nor an admin
    """
    application = await store.get_application(application_id)
    if not application:
        raise NotFoundError("Application not found", details={"application_id": application_id})

    if application.user_id != actor.id and actor.role != UserRole.ADMIN:
        logger.warning(f"User {actor.id} attempted to delete application {application_id} they do not own")
        raise ForbiddenError("Access denied")

    status = application.status
    await store.delete_application(application)

    logger.info(f"Application {application_id} (status={status}) deleted by user {actor.id}")
