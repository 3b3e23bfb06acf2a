"""
Celery Task Modules

Background tasks for notifications:
- notifications.py: reviewer notifications and member job alerts
"""

from jobboard.tasks.notifications import (
    notify_reviewers,
    send_job_alerts,
)

__all__ = [
    "notify_reviewers",
    "send_job_alerts",
]
