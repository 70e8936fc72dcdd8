"""
Authentication endpoints and dependencies.

Registration and login issue a signed access token. The token is returned
in the body and also set as an httpOnly cookie; requests may present it
either as `Authorization: Bearer <token>` or through the cookie.
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Header, Response, Cookie
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from jobboard.database import get_db
from jobboard.models.user import User
from jobboard.config import settings
from jobboard.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    UserResponse,
    ProfileUpdate,
    ProfileResponse,
)
from jobboard.schemas.application import MessageResponse
from jobboard.services.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
)

logger = logging.getLogger(__name__)
router = APIRouter()

AUTH_COOKIE = "auth_token"


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,  # Prevents JavaScript access (XSS protection)
        samesite="lax",  # CSRF protection
        max_age=settings.access_token_ttl_minutes * 60,
        secure=not settings.debug,  # HTTPS-only outside debug mode
    )


def _extract_token(authorization: Optional[str], auth_token: Optional[str]) -> Optional[str]:
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
    return auth_token


# Endpoints
@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    request: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an account and log it in.

    Returns:
        201: Account created, token issued
        400: Email already registered
    """
    result = await db.execute(select(User).where(User.email == request.email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="User already exists with this email")

    user = User(
        email=request.email,
        password_hash=hash_password(request.password),
        name=request.name.strip(),
        role=request.role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(f"Registered user {user.id} ({user.email}) with role {user.role.value}")

    token = create_access_token(user.id)
    _set_auth_cookie(response, token)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Authenticate with email and password.

    Returns:
        200: Credentials valid, token issued
        401: Unknown email or wrong password
    """
    result = await db.execute(select(User).where(User.email == request.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(request.password, user.password_hash):
        logger.warning(f"Failed login attempt for {request.email}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info(f"Successful login: {user.email}")

    token = create_access_token(user.id)
    _set_auth_cookie(response, token)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


# Authentication Dependencies
async def get_optional_user(
    authorization: Optional[str] = Header(None),
    auth_token: Optional[str] = Cookie(None),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Resolve the caller if a valid token was presented, else None.

    Used by public endpoints whose output depends on the caller's role.
    """
    token = _extract_token(authorization, auth_token)
    if not token:
        return None

    user_id = decode_access_token(token)
    if user_id is None:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user)
) -> User:
    """
    Dependency to get the authenticated user.

    Raises:
        HTTPException 401: No token, invalid/expired token, or unknown user
    """
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Dependency to require admin role.

    Raises:
        HTTPException 403: If user is not an admin
    """
    if not current_user.is_admin():
        logger.warning(
            f"User {current_user.email} (role={current_user.role.value}) "
            f"attempted to access admin endpoint"
        )
        raise HTTPException(status_code=403, detail="Admin access required")

    return current_user


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user."""
    return current_user


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Return the authenticated user wrapped as {"user": ...}."""
    return ProfileResponse(user=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update the caller's own name and/or email.

    Returns:
        200: Profile updated
        400: No fields given, or the email belongs to another account
    """
    updates = request.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    if "email" in updates:
        result = await db.execute(
            select(User).where(User.email == updates["email"], User.id != current_user.id)
        )
        if result.scalar_one_or_none():
            raise HTTPException(status_code=400, detail="Email is already in use")

    if "name" in updates:
        updates["name"] = updates["name"].strip()
        if len(updates["name"]) < 2:
            raise HTTPException(status_code=400, detail="Name must be at least 2 characters")

    for field, value in updates.items():
        setattr(current_user, field, value)
    current_user.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(current_user)

    logger.info(f"User {current_user.id} updated profile fields: {sorted(updates)}")

    return ProfileResponse(user=UserResponse.model_validate(current_user))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    current_user: User = Depends(get_current_user)
):
    """Clear the authentication cookie."""
    response.delete_cookie(key=AUTH_COOKIE, httponly=True, samesite="lax")

    logger.info(f"User logged out: {current_user.email}")

    return MessageResponse(message="Logged out successfully")
