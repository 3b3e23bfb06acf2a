"""
Public Listing - what the job board shows

Only approved postings that have not passed their expiration time are
public. The expiry check runs in the query itself, so a posting disappears
the moment it expires even if the expiry sweep has not yet flipped its
status to `expired`.

Members see full postings; everyone else gets a teaser.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models import JobPosting, Member
from jobboard.schemas import ListingStats
from jobboard.utils import normalize_email, utcnow


def is_expired(posting: JobPosting, now: Optional[datetime] = None) -> bool:
    return posting.expires_at is not None and posting.expires_at <= (now or utcnow())


def is_public(posting: JobPosting, now: Optional[datetime] = None) -> bool:
    return posting.status == "approved" and not is_expired(posting, now)


async def get_member(db: AsyncSession, email: Optional[str]) -> Optional[Member]:
    email = normalize_email(email)
    if not email:
        return None
    result = await db.execute(select(Member).where(func.lower(Member.email) == email))
    return result.scalar_one_or_none()


async def list_public_postings(db: AsyncSession, now: Optional[datetime] = None) -> List[JobPosting]:
    now = now or utcnow()
    query = (
        select(JobPosting)
        .where(JobPosting.status == "approved")
        .where(or_(JobPosting.expires_at.is_(None), JobPosting.expires_at > now))
        .order_by(JobPosting.featured.desc(), JobPosting.created_at.desc())
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_public_posting(
    db: AsyncSession, slug: str, now: Optional[datetime] = None
) -> Optional[JobPosting]:
    result = await db.execute(select(JobPosting).where(JobPosting.slug == slug))
    posting = result.scalar_one_or_none()
    if posting is None or not is_public(posting, now):
        return None
    return posting


def listing_stats(postings: List[JobPosting]) -> ListingStats:
    return ListingStats(
        total=len(postings),
        paid=sum(1 for p in postings if p.is_paid),
        volunteer=sum(1 for p in postings if p.job_type == "volunteer"),
        remote=sum(1 for p in postings if p.location_type == "remote"),
    )
