"""
Seed a development database with an admin account and sample jobs.

Usage: python -m jobboard.seed
"""
import asyncio
import logging
import os

from sqlalchemy import select, func

from jobboard import database
from jobboard.models.job import Job, JobType, JobStatus
from jobboard.models.user import User, UserRole
from jobboard.services.security import hash_password

logger = logging.getLogger(__name__)

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@jobboard.com")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")

SAMPLE_JOBS = [
    {
        "title": "Senior Software Engineer",
        "description": "We are looking for a Senior Software Engineer to join our team. "
                       "You will develop and maintain web applications using modern technologies.",
        "company": "TechCorp Inc.",
        "location": "San Francisco, CA",
        "salary_min": 120000,
        "salary_max": 180000,
    },
    {
        "title": "Frontend Developer",
        "description": "Join our frontend team to build responsive user interfaces. "
                       "Experience with React, Vue.js or Angular is required.",
        "company": "WebSolutions Ltd.",
        "location": "New York, NY",
        "salary_min": 80000,
        "salary_max": 120000,
    },
    {
        "title": "DevOps Engineer",
        "description": "Help us scale our infrastructure and improve our deployment processes.",
        "company": "CloudTech Solutions",
        "location": "Remote",
        "salary_min": 90000,
        "salary_max": 140000,
    },
    {
        "title": "Data Science Intern",
        "description": "Work with our analytics team on forecasting models and dashboards.",
        "company": "DataWorks",
        "location": "Austin, TX",
        "salary_min": None,
        "salary_max": None,
        "type": JobType.INTERNSHIP,
    },
]


async def seed() -> None:
    await database.init_db()

    async with database.AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.email == ADMIN_EMAIL))
        admin = result.scalar_one_or_none()

        if not admin:
            admin = User(
                email=ADMIN_EMAIL,
                password_hash=hash_password(ADMIN_PASSWORD),
                name="Admin User",
                role=UserRole.ADMIN,
            )
            db.add(admin)
            await db.commit()
            await db.refresh(admin)
            logger.info(f"Admin user created: {ADMIN_EMAIL}")
        else:
            logger.info("Admin user already exists")

        job_count = (await db.execute(select(func.count(Job.id)))).scalar_one()
        if job_count == 0:
            for sample in SAMPLE_JOBS:
                db.add(Job(
                    title=sample["title"],
                    description=sample["description"],
                    company=sample["company"],
                    location=sample["location"],
                    salary_min=sample["salary_min"],
                    salary_max=sample["salary_max"],
                    type=sample.get("type", JobType.FULL_TIME).value,
                    status=JobStatus.ACTIVE.value,
                    posted_by=admin.id,
                ))
            await db.commit()
            logger.info(f"Created {len(SAMPLE_JOBS)} sample jobs")
        else:
            logger.info(f"{job_count} jobs already present, skipping sample jobs")

    await database.engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(seed())
