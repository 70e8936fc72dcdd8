from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text, Index, UniqueConstraint

from jobboard.database import Base


class ApplicationStatus(str, Enum):
    """Review status of an application"""
    PENDING = "pending"
    REVIEWED = "reviewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    cover_letter = Column(Text, nullable=False)
    cv_link = Column(String(2048), nullable=True)

    # Review status (initial state is set only on submission)
    status = Column(String, nullable=False, default=ApplicationStatus.PENDING.value)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        # At most one application per user per job
        UniqueConstraint('job_id', 'user_id', name='uq_application_job_user'),

        Index('idx_applications_user_created', 'user_id', 'created_at'),
    )
