"""
Background Scheduler - Posting Expiry Sweep

Approved postings whose `expires_at` has passed are moved to `expired`.
The public listing already hides them by date, so the sweep only keeps the
stored status (and the poster dashboard grouping) in line.

Default Schedule: every hour (configurable via EXPIRY_SWEEP_MINUTES)
"""

import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import update

from jobboard.config import get_settings
from jobboard.database import async_session
from jobboard.middleware.metrics import record_expired
from jobboard.models import JobPosting
from jobboard.utils import utcnow

settings = get_settings()
scheduler = AsyncIOScheduler()
logger = logging.getLogger(__name__)


async def expire_postings(session_factory=None, now: Optional[datetime] = None) -> int:
    """
    Mark approved postings past their expiry date as expired.

    Returns:
        Number of postings expired
    """
    session_factory = session_factory or async_session
    now = now or utcnow()

    async with session_factory() as db:
        result = await db.execute(
            update(JobPosting)
            .where(JobPosting.status == "approved")
            .where(JobPosting.expires_at.is_not(None))
            .where(JobPosting.expires_at <= now)
            .values(status="expired")
        )
        await db.commit()

    count = result.rowcount or 0
    if count:
        record_expired(count)
        logger.info(f"Expired {count} postings")
    return count


def start_scheduler():
    """Start the background scheduler"""
    scheduler.add_job(
        expire_postings,
        trigger=IntervalTrigger(minutes=settings.expiry_sweep_minutes),
        id="expire_postings",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started: expiry sweep every {settings.expiry_sweep_minutes} minutes")


def stop_scheduler():
    """Stop the background scheduler"""
    if scheduler.running:
        scheduler.shutdown()
