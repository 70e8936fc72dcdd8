"""Authentication-related Pydantic schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from jobboard.models.user import UserRole


class RegisterRequest(BaseModel):
    """Request to create an account."""
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    name: str = Field(min_length=2, max_length=100)
    role: UserRole = UserRole.USER


class LoginRequest(BaseModel):
    """Request to log in with email and password."""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Public view of a user account."""
    id: int
    email: str
    name: str
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Response after successful registration or login."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileUpdate(BaseModel):
    """Self-service profile change. Role is not editable; unknown fields are ignored."""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None


class ProfileResponse(BaseModel):
    user: UserResponse
