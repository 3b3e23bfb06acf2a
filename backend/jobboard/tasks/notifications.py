"""
Background Tasks for Email Notifications

Celery tasks for:
- Telling reviewers a new posting is waiting for moderation
- Sending job alerts to subscribed members when a posting is approved

All tasks support:
- Automatic retries when the posting cannot be loaded or the email API fails
- Prometheus metrics
- Per-recipient error isolation for alerts
"""

import logging
import time
from typing import List, Optional

from prometheus_client import Histogram, Counter

from jobboard.celery import celery_app
from jobboard.config import get_settings
from jobboard.services.mailer import EmailMessage, send_email_sync

logger = logging.getLogger(__name__)
settings = get_settings()

# ==================== Prometheus Metrics ====================

TASK_DURATION = Histogram(
    "celery_task_duration_seconds",
    "Time spent executing Celery tasks",
    ["task_name"]
)

TASK_FAILURES = Counter(
    "celery_task_failures_total",
    "Number of Celery task failures",
    ["task_name"]
)

EMAILS_SENT = Counter(
    "notification_emails_sent_total",
    "Number of notification emails sent",
    ["kind"]
)


# ==================== Helper Functions ====================

def get_posting(job_id: str):
    """Get posting by ID from database."""
    from jobboard.database import sync_session
    from jobboard.models import JobPosting

    with sync_session() as session:
        return session.query(JobPosting).filter(JobPosting.id == job_id).first()


def get_alert_subscribers() -> list:
    """Get members subscribed to job alerts."""
    from jobboard.database import sync_session
    from jobboard.models import Member

    with sync_session() as session:
        return (
            session.query(Member)
            .filter(Member.subscribed_to_job_alerts.is_(True))
            .all()
        )


def unsubscribe_link(member_id: str) -> str:
    return f"{settings.site_url.rstrip('/')}/unsubscribe?member={member_id}&type=job_alerts"


def job_link(slug: str) -> str:
    return f"{settings.site_url.rstrip('/')}/jobs/{slug}"


def enqueue(task, *args) -> bool:
    """
    Queue a task without failing the request that triggered it.

    Returns:
        False when the broker is unreachable (the failure is logged)
    """
    try:
        task.delay(*args)
        return True
    except Exception as e:
        logger.error(f"Could not enqueue {task.name}: {e}")
        return False


# ==================== Celery Tasks ====================

@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)
def notify_reviewers(self, job_id: str, reviewers: Optional[List[str]] = None) -> bool:
    """
    Email the reviewers about a newly submitted posting.

    Args:
        job_id: Posting UUID
        reviewers: Override recipient list (defaults to REVIEWER_EMAILS)

    Returns:
        True if an email was sent
    """
    start_time = time.time()
    recipients = reviewers if reviewers is not None else settings.reviewer_emails

    try:
        if not recipients:
            logger.info("No reviewer emails configured, skipping notification")
            return False

        posting = get_posting(job_id)
        if not posting:
            logger.warning(f"Posting not found: {job_id}")
            return False

        send_email_sync(EmailMessage(
            to=list(recipients),
            subject=f"New job posting awaiting review: {posting.title}",
            text=(
                f"{posting.submitter_name} <{posting.submitter_email}> submitted "
                f"\"{posting.title}\" at {posting.organization}.\n\n"
                f"Type: {posting.job_type}, {posting.location_type}\n"
                f"Review it in the moderation queue."
            ),
        ))
        EMAILS_SENT.labels(kind="reviewer").inc()
        return True

    except Exception as exc:
        TASK_FAILURES.labels(task_name="notify_reviewers").inc()
        logger.error(f"Reviewer notification failed for {job_id}: {exc}")
        raise self.retry(exc=exc, countdown=60)

    finally:
        duration = time.time() - start_time
        TASK_DURATION.labels(task_name="notify_reviewers").observe(duration)


@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)
def send_job_alerts(self, job_id: str) -> dict:
    """
    Email every subscribed member about a newly approved posting.

    A failed recipient is logged and skipped; the task is only retried
    when the posting or the subscriber list cannot be loaded.

    Returns:
        Dict with sent/failed counts
    """
    start_time = time.time()
    stats = {"sent": 0, "failed": 0}

    try:
        posting = get_posting(job_id)
        if not posting or posting.status != "approved":
            logger.warning(f"Skipping alerts for {job_id}: posting missing or not approved")
            return stats
        subscribers = get_alert_subscribers()
    except Exception as exc:
        TASK_FAILURES.labels(task_name="send_job_alerts").inc()
        logger.error(f"Job alert task failed: {exc}")
        raise self.retry(exc=exc, countdown=60)

    try:
        for member in subscribers:
            try:
                send_email_sync(EmailMessage(
                    to=[member.email],
                    subject=f"New opportunity: {posting.title} at {posting.organization}",
                    text=(
                        f"Hi {member.first_name or 'there'},\n\n"
                        f"A new {posting.job_type.replace('-', ' ')} opportunity was posted:\n"
                        f"{posting.title} ({posting.organization})\n"
                        f"{job_link(posting.slug)}\n\n"
                        f"Unsubscribe from job alerts: {unsubscribe_link(member.id)}\n"
                    ),
                ))
                stats["sent"] += 1
                EMAILS_SENT.labels(kind="job_alert").inc()
            except Exception as e:
                logger.error(f"Job alert to member {member.id} failed: {e}")
                stats["failed"] += 1
                TASK_FAILURES.labels(task_name="send_job_alerts").inc()

        logger.info(f"Job alerts for {job_id}: {stats['sent']} sent, {stats['failed']} failed")
        return stats

    finally:
        duration = time.time() - start_time
        TASK_DURATION.labels(task_name="send_job_alerts").observe(duration)
