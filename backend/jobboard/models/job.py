from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Index

from jobboard.database import Base


class JobType(str, Enum):
    """Employment type of a posting"""
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class JobStatus(str, Enum):
    """Lifecycle status; only ACTIVE jobs accept applications"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    CLOSED = "closed"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Posting details
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    company = Column(String(100), nullable=False)
    location = Column(String(100), nullable=False)

    # Salary range (min <= max when both present)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)

    type = Column(String, nullable=False, default=JobType.FULL_TIME.value)
    status = Column(String, nullable=False, default=JobStatus.ACTIVE.value)

    posted_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_jobs_status_created', 'status', 'created_at'),
    )

    def is_active(self) -> bool:
        return self.status == JobStatus.ACTIVE.value
