"""
Poster Management - dashboard, ownership checks and posting edits

Two notions of "mine" are used:
    - The dashboard lists every posting associated with the poster's email
      (see services.associations).
    - Changing a posting or seeing its applicants requires the posting's
      submitter email to match the signed-in email exactly (ignoring case).
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models import Application, JobPosting
from jobboard.schemas import (
    DashboardResponse,
    DashboardStats,
    JobUpdate,
    PosterJobSummary,
)
from jobboard.services.associations import associated_postings
from jobboard.utils import normalize_email, to_naive_utc, utcnow

logger = logging.getLogger(__name__)


class PosterError(ValueError):
    pass


# Columns that cannot be cleared by an edit
REQUIRED_SETTINGS = ("job_type", "location_type", "is_paid", "resume_required", "cover_letter_required")


async def has_submitted_postings(db: AsyncSession, email: str) -> bool:
    result = await db.execute(
        select(JobPosting.id)
        .where(func.lower(JobPosting.submitter_email) == normalize_email(email))
        .limit(1)
    )
    return result.first() is not None


async def application_counts(db: AsyncSession, job_ids: List[str]) -> Dict[str, int]:
    if not job_ids:
        return {}
    query = (
        select(Application.job_id, func.count(Application.id))
        .where(Application.job_id.in_(job_ids))
        .group_by(Application.job_id)
    )
    result = await db.execute(query)
    return {row[0]: row[1] for row in result.all()}


async def build_dashboard(
    db: AsyncSession, email: str, full_closure: bool = False
) -> DashboardResponse:
    email = normalize_email(email)
    result = await db.execute(select(JobPosting).order_by(JobPosting.created_at.desc()))
    postings = associated_postings(email, result.scalars().all(), full_closure=full_closure)

    if not postings:
        return DashboardResponse(
            email=email,
            message=f"No job postings found for {email}.",
            stats=DashboardStats(total_postings=0, active=0, pending=0, total_applications=0),
        )

    counts = await application_counts(db, [p.id for p in postings])
    summaries = []
    for posting in postings:
        summary = PosterJobSummary.model_validate(posting)
        summary.application_count = counts.get(posting.id, 0)
        summaries.append(summary)

    active = [s for s in summaries if s.status == "approved"]
    pending = [s for s in summaries if s.status == "pending"]
    past = [s for s in summaries if s.status not in ("approved", "pending")]

    return DashboardResponse(
        email=email,
        active=active,
        pending=pending,
        past=past,
        stats=DashboardStats(
            total_postings=len(summaries),
            active=len(active),
            pending=len(pending),
            total_applications=sum(s.application_count for s in summaries),
        ),
    )


async def get_owned_posting(db: AsyncSession, job_id: str, email: str) -> Optional[JobPosting]:
    result = await db.execute(
        select(JobPosting)
        .where(JobPosting.id == job_id)
        .where(func.lower(JobPosting.submitter_email) == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def update_posting(db: AsyncSession, posting: JobPosting, update: JobUpdate) -> JobPosting:
    """
    Apply a poster's edits. Last write wins.

    Raises:
        PosterError: the edit would leave the posting invalid
    """
    update_data = update.model_dump(exclude_unset=True)

    for field in ("title", "organization", "description"):
        if field in update_data and not (update_data[field] or "").strip():
            raise PosterError(f"{field.capitalize()} cannot be empty")

    for field in REQUIRED_SETTINGS:
        if field in update_data and update_data[field] is None:
            raise PosterError(f"{field} cannot be cleared")

    if "expires_at" in update_data:
        update_data["expires_at"] = to_naive_utc(update_data["expires_at"])
        if update_data["expires_at"] is not None and update_data["expires_at"] <= utcnow():
            raise PosterError("Expiration date must be in the future")

    contact_email = update_data.get("contact_email", posting.contact_email)
    application_url = update_data.get("application_url", posting.application_url)
    if not contact_email and not application_url:
        raise PosterError("Provide a contact email or an application URL")

    for field, value in update_data.items():
        setattr(posting, field, value)

    if posting.is_paid is False:
        posting.salary_range = None
        posting.hourly_rate = None

    await db.commit()
    await db.refresh(posting)
    logger.info(f"Posting {posting.id} updated by its poster")
    return posting


async def archive_posting(db: AsyncSession, posting: JobPosting) -> JobPosting:
    posting.status = "archived"
    await db.commit()
    await db.refresh(posting)
    logger.info(f"Posting {posting.id} archived by its poster")
    return posting


async def get_owned_application(
    db: AsyncSession, application_id: str, email: str
) -> Optional[Application]:
    result = await db.execute(
        select(Application)
        .join(JobPosting, JobPosting.id == Application.job_id)
        .where(Application.id == application_id)
        .where(func.lower(JobPosting.submitter_email) == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def list_applicants(db: AsyncSession, job_id: str) -> List[Application]:
    result = await db.execute(
        select(Application)
        .where(Application.job_id == job_id)
        .order_by(Application.created_at.desc())
    )
    return list(result.scalars().all())


async def set_application_status(
    db: AsyncSession, application: Application, status: str
) -> Application:
    application.status = status
    await db.commit()
    await db.refresh(application)
    return application
