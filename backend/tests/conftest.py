"""
Shared fixtures: an in-memory database, an HTTP client wired to the app
with its dependencies overridden, and factories for test records.
"""

import os
import tempfile

# Settings are cached on first import; point storage and integrations at
# test values before any jobboard module loads.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="jobboard-storage-"))
os.environ["EMAIL_API_URL"] = ""
os.environ["LOOKUP_API_URL"] = ""
os.environ.setdefault("REVIEWER_PASSWORD", "review-secret")

from datetime import timedelta
from typing import Optional
from unittest.mock import MagicMock

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from jobboard.auth import COOKIE_NAME, REVIEWER_COOKIE_NAME, create_reviewer_token, create_session_token
from jobboard.database import Base, get_db
from jobboard.main import app
from jobboard.models import Application, JobPosting, Member
from jobboard.services.otp import OtpError, get_otp_store
from jobboard.utils import slugify, utcnow


class FakeOtpStore:
    """In-memory stand-in for the Redis-backed code store."""

    def __init__(self, code: str = "123456"):
        self.code = code
        self.issued = []

    async def issue(self, email: str) -> str:
        self.issued.append(email)
        return self.code

    async def verify(self, email: str, code: str) -> None:
        if email not in self.issued:
            raise OtpError("Code has expired. Please request a new one.")
        if code != self.code:
            raise OtpError("Invalid code")
        self.issued.remove(email)

    async def close(self) -> None:
        pass


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def otp_store():
    return FakeOtpStore()


@pytest.fixture
def enqueued(monkeypatch):
    """Capture background tasks instead of sending them to the broker."""
    mock = MagicMock(return_value=True)
    monkeypatch.setattr("jobboard.services.submission.enqueue", mock)
    monkeypatch.setattr("jobboard.services.moderation.enqueue", mock)
    return mock


@pytest.fixture
async def client(session_factory, otp_store, enqueued):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_otp_store():
        return otp_store

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_otp_store] = override_get_otp_store

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def sign_in(client: httpx.AsyncClient, email: str) -> None:
    client.cookies.set(COOKIE_NAME, create_session_token(email))


def sign_in_reviewer(client: httpx.AsyncClient) -> None:
    client.cookies.set(REVIEWER_COOKIE_NAME, create_reviewer_token())


async def make_posting(db: AsyncSession, **overrides) -> JobPosting:
    title = overrides.pop("title", "Field Organizer")
    values = dict(
        slug=slugify(title),
        title=title,
        organization="County Democrats",
        description="Knock doors and recruit volunteers.",
        job_type="full-time",
        location="Kansas City, MO",
        location_type="in-person",
        is_paid=True,
        salary_range="$45,000 - $50,000",
        contact_email="hiring@example.org",
        status="approved",
        submitter_name="Pat Poster",
        submitter_email="poster@example.org",
        created_at=utcnow(),
    )
    values.update(overrides)
    posting = JobPosting(**values)
    db.add(posting)
    await db.commit()
    await db.refresh(posting)
    return posting


async def make_member(db: AsyncSession, email: str = "member@example.org", **overrides) -> Member:
    member = Member(email=email, first_name="Morgan", last_name="Member", **overrides)
    db.add(member)
    await db.commit()
    await db.refresh(member)
    return member


async def make_application(db: AsyncSession, posting: JobPosting, **overrides) -> Application:
    values = dict(
        job_id=posting.id,
        applicant_name="Alex Applicant",
        applicant_email="alex@example.org",
        answers={},
        status="submitted",
    )
    values.update(overrides)
    application = Application(**values)
    db.add(application)
    await db.commit()
    await db.refresh(application)
    return application


def days_from_now(days: float):
    return utcnow() + timedelta(days=days)


def question(
    text: str,
    type: str = "text",
    required: bool = False,
    options: Optional[list] = None,
    order: int = 0,
    id: Optional[str] = None,
) -> dict:
    data = {
        "question": text,
        "type": type,
        "required": required,
        "options": options or [],
        "order": order,
    }
    if id:
        data["id"] = id
    return data
