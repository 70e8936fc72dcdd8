"""
Read-model assembly: joins an application with its job and applicant.

The applications table stays normalized; snapshots are fetched from the
store after the core read or write.
"""
from typing import Optional

from jobboard.models.application import Application
from jobboard.schemas.application import ApplicationView, JobSnapshot, UserSnapshot


async def build_application_views(store, applications: list[Application]) -> list[ApplicationView]:
    """Assemble joined views, loading each referenced job and user once."""
    jobs: dict = {}
    users: dict = {}
    views = []

    for application in applications:
        if application.job_id not in jobs:
            jobs[application.job_id] = await store.get_job(application.job_id)
        if application.user_id not in users:
            users[application.user_id] = await store.get_user(application.user_id)

        job = jobs[application.job_id]
        user = users[application.user_id]
        views.append(
            ApplicationView(
                id=application.id,
                job_id=application.job_id,
                user_id=application.user_id,
                cover_letter=application.cover_letter,
                cv_link=application.cv_link,
                status=application.status,
                created_at=application.created_at,
                updated_at=application.updated_at,
                job=JobSnapshot.model_validate(job) if job else None,
                user=UserSnapshot.model_validate(user) if user else None,
            )
        )

    return views


async def build_application_view(store, application: Application) -> ApplicationView:
    views = await build_application_views(store, [application])
    return views[0]
