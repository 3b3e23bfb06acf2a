"""
Celery application for outbound email

Two queues:
    - default: reviewer notifications (one email per submission)
    - alerts:  job alerts fanned out to every subscribed member

Usage:
    # Worker for both queues:
    celery -A jobboard.celery worker -Q default,alerts --loglevel=info

    # The API enqueues through jobboard.tasks.notifications.enqueue()
"""

from celery import Celery
from jobboard.config import get_settings

settings = get_settings()

celery_app = Celery(
    "jobboard",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # One task at a time per worker process
    worker_prefetch_multiplier=1,
    task_time_limit=15 * 60,
    task_soft_time_limit=10 * 60,

    # Only the sent/failed counts are kept
    result_expires=24 * 3600,
    task_ignore_result=False,

    # Acknowledge only after the task finishes
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    task_default_queue="default",
    task_routes={
        "jobboard.tasks.notifications.notify_reviewers": {"queue": "default"},
        "jobboard.tasks.notifications.send_job_alerts": {"queue": "alerts"},
    },
)

celery_app.autodiscover_tasks(["jobboard.tasks"])
