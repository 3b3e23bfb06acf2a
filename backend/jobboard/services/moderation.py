"""
Reviewer Moderation

Only pending postings can be decided. Approval publishes the posting and
queues job alerts for subscribed members; rejection records the reason
shown to the poster.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models import JobPosting
from jobboard.tasks.notifications import enqueue, send_job_alerts
from jobboard.utils import utcnow

logger = logging.getLogger(__name__)


class ModerationError(ValueError):
    pass


async def list_pending(db: AsyncSession) -> List[JobPosting]:
    result = await db.execute(
        select(JobPosting)
        .where(JobPosting.status == "pending")
        .order_by(JobPosting.created_at.asc())
    )
    return list(result.scalars().all())


def _require_pending(posting: JobPosting) -> None:
    if posting.status != "pending":
        raise ModerationError(f"Posting is already {posting.status}")


async def approve_posting(db: AsyncSession, posting: JobPosting) -> JobPosting:
    _require_pending(posting)
    posting.status = "approved"
    posting.rejection_reason = None
    posting.reviewed_at = utcnow()
    await db.commit()
    await db.refresh(posting)
    logger.info(f"Posting {posting.id} approved")

    enqueue(send_job_alerts, posting.id)
    return posting


async def reject_posting(
    db: AsyncSession, posting: JobPosting, reason: Optional[str] = None
) -> JobPosting:
    _require_pending(posting)
    posting.status = "rejected"
    posting.rejection_reason = (reason or "").strip() or None
    posting.reviewed_at = utcnow()
    await db.commit()
    await db.refresh(posting)
    logger.info(f"Posting {posting.id} rejected")
    return posting
