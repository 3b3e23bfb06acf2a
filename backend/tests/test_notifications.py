"""
Tests for Celery Notification Tasks

Tests cover:
- Celery app configuration
- Reviewer notification emails
- Job alerts to subscribed members with per-recipient isolation
- Retry on load failures
- enqueue() never raises
"""

from unittest.mock import MagicMock, patch

import pytest

from jobboard.celery import celery_app
from jobboard.tasks.notifications import (
    enqueue,
    job_link,
    notify_reviewers,
    send_job_alerts,
    unsubscribe_link,
)


@pytest.fixture
def mock_posting():
    posting = MagicMock()
    posting.id = "job-123"
    posting.slug = "field-organizer-ab12cd34"
    posting.title = "Field Organizer"
    posting.organization = "County Democrats"
    posting.job_type = "full-time"
    posting.location_type = "in-person"
    posting.status = "approved"
    posting.submitter_name = "Pat Poster"
    posting.submitter_email = "poster@example.org"
    return posting


def member(member_id, email):
    m = MagicMock()
    m.id = member_id
    m.email = email
    m.first_name = "Sam"
    return m


class TestCeleryApp:
    def test_celery_app_exists(self):
        assert celery_app.main == "jobboard"

    def test_alerts_routed_to_own_queue(self):
        routes = celery_app.conf.task_routes
        assert routes["jobboard.tasks.notifications.send_job_alerts"] == {"queue": "alerts"}

    def test_tasks_are_celery_tasks(self):
        assert hasattr(notify_reviewers, "delay")
        assert hasattr(send_job_alerts, "apply_async")


class TestLinks:
    def test_unsubscribe_link(self):
        link = unsubscribe_link("member-1")
        assert link.endswith("/unsubscribe?member=member-1&type=job_alerts")

    def test_job_link(self):
        assert job_link("field-organizer").endswith("/jobs/field-organizer")


class TestNotifyReviewers:
    @patch("jobboard.tasks.notifications.send_email_sync")
    @patch("jobboard.tasks.notifications.get_posting")
    def test_sends_to_reviewers(self, mock_get_posting, mock_send, mock_posting):
        mock_get_posting.return_value = mock_posting

        assert notify_reviewers.run("job-123", ["review@example.org"]) is True

        message = mock_send.call_args[0][0]
        assert message.to == ["review@example.org"]
        assert "Field Organizer" in message.subject

    @patch("jobboard.tasks.notifications.send_email_sync")
    @patch("jobboard.tasks.notifications.get_posting")
    def test_no_reviewers_configured(self, mock_get_posting, mock_send):
        assert notify_reviewers.run("job-123", []) is False
        mock_get_posting.assert_not_called()
        mock_send.assert_not_called()

    @patch("jobboard.tasks.notifications.send_email_sync")
    @patch("jobboard.tasks.notifications.get_posting")
    def test_missing_posting(self, mock_get_posting, mock_send):
        mock_get_posting.return_value = None
        assert notify_reviewers.run("job-404", ["review@example.org"]) is False
        mock_send.assert_not_called()

    @patch("jobboard.tasks.notifications.send_email_sync")
    @patch("jobboard.tasks.notifications.get_posting")
    def test_retries_on_email_failure(self, mock_get_posting, mock_send, mock_posting):
        mock_get_posting.return_value = mock_posting
        mock_send.side_effect = RuntimeError("email API down")

        # Called outside a worker, retry re-raises the original error
        with pytest.raises(RuntimeError):
            notify_reviewers.run("job-123", ["review@example.org"])


class TestSendJobAlerts:
    @patch("jobboard.tasks.notifications.send_email_sync")
    @patch("jobboard.tasks.notifications.get_alert_subscribers")
    @patch("jobboard.tasks.notifications.get_posting")
    def test_emails_each_subscriber(self, mock_get_posting, mock_subscribers, mock_send, mock_posting):
        mock_get_posting.return_value = mock_posting
        mock_subscribers.return_value = [
            member("m1", "one@example.org"),
            member("m2", "two@example.org"),
        ]

        result = send_job_alerts.run("job-123")

        assert result == {"sent": 2, "failed": 0}
        first = mock_send.call_args_list[0][0][0]
        assert first.to == ["one@example.org"]
        assert "member=m1&type=job_alerts" in first.text
        assert "/jobs/field-organizer-ab12cd34" in first.text

    @patch("jobboard.tasks.notifications.send_email_sync")
    @patch("jobboard.tasks.notifications.get_alert_subscribers")
    @patch("jobboard.tasks.notifications.get_posting")
    def test_one_failure_does_not_stop_others(self, mock_get_posting, mock_subscribers, mock_send, mock_posting):
        mock_get_posting.return_value = mock_posting
        mock_subscribers.return_value = [
            member("m1", "one@example.org"),
            member("m2", "two@example.org"),
        ]
        mock_send.side_effect = [RuntimeError("bounced"), None]

        assert send_job_alerts.run("job-123") == {"sent": 1, "failed": 1}

    @patch("jobboard.tasks.notifications.send_email_sync")
    @patch("jobboard.tasks.notifications.get_alert_subscribers")
    @patch("jobboard.tasks.notifications.get_posting")
    def test_skips_unapproved(self, mock_get_posting, mock_subscribers, mock_send, mock_posting):
        mock_posting.status = "rejected"
        mock_get_posting.return_value = mock_posting

        assert send_job_alerts.run("job-123") == {"sent": 0, "failed": 0}
        mock_subscribers.assert_not_called()
        mock_send.assert_not_called()


class TestEnqueue:
    def test_enqueue_delays_task(self):
        task = MagicMock()
        assert enqueue(task, "job-123") is True
        task.delay.assert_called_once_with("job-123")

    def test_enqueue_swallows_broker_errors(self):
        task = MagicMock()
        task.name = "notify_reviewers"
        task.delay.side_effect = ConnectionError("broker down")
        assert enqueue(task, "job-123") is False


class TestRetryPolicy:
    def test_tasks_retry_three_times(self):
        assert notify_reviewers.max_retries == 3
        assert send_job_alerts.max_retries == 3
