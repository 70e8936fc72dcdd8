"""Database models"""
from jobboard.models.user import User, UserRole
from jobboard.models.job import Job, JobType, JobStatus
from jobboard.models.application import Application, ApplicationStatus

__all__ = [
    "User",
    "UserRole",
    "Job",
    "JobType",
    "JobStatus",
    "Application",
    "ApplicationStatus",
]
