"""
Pytest fixtures for testing.
"""
import os

# Settings are read at import time; configure them before importing the app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import pytest_asyncio
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import jobboard.database
from jobboard.database import Base
# Import ALL models so Base.metadata knows about all tables
from jobboard.models.user import User, UserRole
from jobboard.models.job import Job, JobStatus
from jobboard.models.application import Application
from jobboard.services.security import hash_password, create_access_token

# Now import app (after we can override database)
from jobboard.main import app as fastapi_app

from fakes import InMemoryApplicationStore, make_job, make_user


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "password123"


@pytest.fixture(scope="session")
def password_hash() -> str:
    """bcrypt is slow on purpose; hash the shared test password once."""
    return hash_password(TEST_PASSWORD)


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Ensures cleanup happens even if test fails.
    """
    # StaticPool keeps a single connection alive so all sessions see the
    # same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Replace the app's engine and sessionmaker so get_db() uses the test DB
    original_engine = jobboard.database.engine
    original_sessionmaker = jobboard.database.AsyncSessionLocal

    jobboard.database.engine = test_engine
    jobboard.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    session = jobboard.database.AsyncSessionLocal()

    try:
        yield session
    finally:
        await session.close()
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await test_engine.dispose()

        jobboard.database.engine = original_engine
        jobboard.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def async_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing endpoints.

    The db fixture already replaced the engine with the test engine,
    so all endpoints will automatically use the test database.
    """
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True  # Follow 307 redirects for trailing slashes
    ) as client:
        yield client


async def _create_user(db: AsyncSession, email: str, name: str, role: UserRole, password_hash: str) -> User:
    user = User(email=email, name=name, role=role, password_hash=password_hash)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db: AsyncSession, password_hash: str) -> User:
    """Regular (non-admin) user."""
    return await _create_user(db, "user@example.com", "Regular User", UserRole.USER, password_hash)


@pytest_asyncio.fixture
async def other_user(db: AsyncSession, password_hash: str) -> User:
    """Second regular user, for ownership checks."""
    return await _create_user(db, "other@example.com", "Other User", UserRole.USER, password_hash)


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession, password_hash: str) -> User:
    return await _create_user(db, "admin@example.com", "Admin User", UserRole.ADMIN, password_hash)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def user_headers(test_user: User) -> dict:
    return auth_headers(test_user)


@pytest.fixture
def other_headers(other_user: User) -> dict:
    return auth_headers(other_user)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return auth_headers(admin_user)


async def _create_job(db: AsyncSession, admin: User, title: str, status: JobStatus) -> Job:
    job = Job(
        title=title,
        description="A job description long enough to pass validation.",
        company="Test Corp",
        location="Remote",
        salary_min=50000,
        salary_max=90000,
        status=status.value,
        posted_by=admin.id,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)
    return job


@pytest_asyncio.fixture
async def active_job(db: AsyncSession, admin_user: User) -> Job:
    return await _create_job(db, admin_user, "Backend Engineer", JobStatus.ACTIVE)


@pytest_asyncio.fixture
async def inactive_job(db: AsyncSession, admin_user: User) -> Job:
    return await _create_job(db, admin_user, "Paused Role", JobStatus.INACTIVE)


@pytest_asyncio.fixture
async def closed_job(db: AsyncSession, admin_user: User) -> Job:
    return await _create_job(db, admin_user, "Filled Role", JobStatus.CLOSED)


@pytest.fixture
def cover_letter() -> str:
    return "A sufficiently long cover letter text for this position."


# In-memory store fixtures for service-level tests

@pytest.fixture
def fake_user():
    return make_user(10, UserRole.USER)


@pytest.fixture
def fake_other_user():
    return make_user(11, UserRole.USER)


@pytest.fixture
def fake_admin():
    return make_user(1, UserRole.ADMIN)


@pytest.fixture
def fake_store(fake_user, fake_other_user, fake_admin) -> InMemoryApplicationStore:
    return InMemoryApplicationStore(
        jobs=[
            make_job(1, JobStatus.ACTIVE),
            make_job(2, JobStatus.CLOSED),
            make_job(3, JobStatus.INACTIVE),
            make_job(4, JobStatus.ACTIVE),
        ],
        users=[fake_user, fake_other_user, fake_admin],
    )
