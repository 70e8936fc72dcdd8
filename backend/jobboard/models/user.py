from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Enum as SQLEnum
import enum

from jobboard.database import Base


class UserRole(str, enum.Enum):
    """User role for role-based access control (RBAC)."""
    USER = "user"  # Regular user - applies to jobs, sees own applications
    ADMIN = "admin"  # Admin - manages jobs and reviews all applications


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)

    # Fixed at registration; there is no role-change endpoint
    role = Column(
        SQLEnum(UserRole, name="user_role", create_type=True),
        nullable=False,
        default=UserRole.USER,
        index=True
    )

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == UserRole.ADMIN
